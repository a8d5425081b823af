# -*- coding: utf-8 -*-
"""
The RADEX calculation: validation of the input parameters and the iterative
solution of the non-LTE radiative transfer
"""
from collections import namedtuple
import numpy as np
from radexsolver import (escape_probability,molecule,background,rate_equations,
                         flux)
from radexsolver.molecule import MolecularDataStore
from radexsolver.exceptions import (InvalidConfigurationError,ConvergenceError,
                                    WarningCollector)

SessionConfig = namedtuple('SessionConfig',
                           ['molecule','requested_molecule','column_density','width_v',
                            'Tkin','Tbg','fmin','fmax','collider_densities',
                            'geometry','catalog','reduce'])
SessionConfig.__doc__ = '''Validated parameters of a calculation. molecule is the
    molecule actually used (possibly the hyperfine version of requested_molecule)
    and width_v the line width in [cm/s].'''

#allowed ranges of the input parameters
fmax_limit = 3e7
Tkin_range = (0.1,1e4)
Tbg_range = (0,1e4)
n_colliders_range = (1,7)
density_range = (1e-3,1e13)
column_density_range = (9e4,1e25)
width_v_range = (10,1e8)


def check_range(value,limits,field,description):
    if not limits[0] <= value <= limits[1]:
        raise InvalidConfigurationError(f'invalid {description}: {value}',field=field,
                                        value=value)

def check_parameters(molecule_id,column_density,line_width,Tkin,Tbg,fmin,fmax,
                     collider_densities,geometry='uniform sphere',catalog='JPL',
                     reduce=False):
    r'''Checks the input parameters of a calculation.

    Args:
        molecule_id (:obj:`str` or :obj:`int`): name or index of the molecule
        column_density (:obj:`float`): column density in [cm\ :sup:`-2`]
        line_width (:obj:`float`): line width (FWHM) in [km/s]
        Tkin (:obj:`float`): kinetic temperature in [K]
        Tbg (:obj:`float`): background temperature in [K]; 0 selects the
            mean Galactic background
        fmin, fmax (:obj:`float`): frequency range of interest in [GHz]
        collider_densities (dict): densities in [cm\ :sup:`-3`] of the
            collision partners
        geometry (:obj:`str`): escape probability geometry
        catalog (:obj:`str`): 'JPL' or 'COLOGNE'
        reduce (:obj:`bool`): solve the reduced system of rate equations

    Returns:
        tuple: the SessionConfig and a list of warning messages

    Raises:
        InvalidConfigurationError: if a parameter is out of range
        UnsupportedMoleculeError: if the molecule is not available with the
            catalog
    '''
    if fmin > fmax:
        raise InvalidConfigurationError(f'fmin ({fmin}) larger than fmax ({fmax})',
                                        field='fmin',value=fmin)
    check_range(fmin,(0,np.inf),'fmin','minimum frequency')
    check_range(fmax,(0,fmax_limit),'fmax','maximum frequency')
    check_range(Tkin,Tkin_range,'Tkin','kinetic temperature')
    check_range(len(collider_densities),n_colliders_range,'collider_densities',
                'number of collision partners')
    check_range(Tbg,Tbg_range,'Tbg','background temperature')
    for collider,density in collider_densities.items():
        if collider not in molecule.colliders:
            raise InvalidConfigurationError(f'unknown collision partner {collider}',
                                            field='collider_densities',value=collider)
        check_range(density,density_range,'collider_densities',
                    f'density of {collider}')
    index = molecule.molecule_index(molecule_id)
    check_range(column_density,column_density_range,'column_density','column density')
    width_v = line_width*1e5
    check_range(width_v,width_v_range,'line_width','line width [cm/s]')
    if geometry not in escape_probability.geometries:
        raise InvalidConfigurationError(f'unknown geometry {geometry}',field='geometry',
                                        value=geometry)
    molecule.catalog_name(index,catalog)
    requested = molecule.molecule_names[index]
    effective = requested
    messages = []
    if catalog == 'JPL' and requested in molecule.hyperfine_substitutions:
        hfs_molecule,fmax_hfs = molecule.hyperfine_substitutions[requested]
        if fmax < fmax_hfs:
            effective = hfs_molecule
            messages.append(f'molecule changed to {hfs_molecule} to account for'
                            +' the hyperfine splitting of the lowest transitions')
    config = SessionConfig(molecule=effective,requested_molecule=requested,
                           column_density=column_density,width_v=width_v,Tkin=Tkin,
                           Tbg=Tbg,fmin=fmin,fmax=fmax,
                           collider_densities=dict(collider_densities),
                           geometry=geometry,catalog=catalog,reduce=reduce)
    return config,messages


class RadexSession():

    '''
    Solving the non-LTE radiative transfer of one molecule with the RADEX
    escape probability method.

    The public attributes molecule, column_density, line_width, Tkin, Tbg,
    fmin, fmax, collider_densities, geometry, catalog and reduce can be
    modified; calling update() then repeats the calculation.

    Attributes:
        config (SessionConfig): the validated parameters of the last calculation
        emitting_molecule (radexsolver.molecule.Molecule): the molecular data
        results (list): a flux.LineResult for each line in the frequency range
        Tex (numpy.ndarray): excitation temperature of each transition
        tau (numpy.ndarray): optical depth of each transition
        level_pop (numpy.ndarray): fractional population of each level
        n_iter_convergence (:obj:`int`): number of iterations needed
        warnings (radexsolver.exceptions.WarningCollector): warnings of the
            last successful calculation

    Note:
        The results are only replaced after a successful calculation.
    '''
    relative_convergence = 1e-6
    min_iter = 10
    max_iter = 9999
    underrelaxation = 0.3
    min_tau_considered_for_convergence = 1e-2
    very_thick_tau = 1e5

    def __init__(self,molecule,column_density,line_width,Tkin,Tbg,fmin,fmax,
                 collider_densities,geometry='uniform sphere',catalog='JPL',
                 reduce=False,data_store=None,verbose=False):
        r'''Sets up the calculation and solves the radiative transfer.

        Args:
            molecule (:obj:`str` or :obj:`int`): name (as in
                radexsolver.molecule.molecule_names) or index of the molecule
            column_density (:obj:`float`): column density in [cm\ :sup:`-2`]
            line_width (:obj:`float`): line width (FWHM) in [km/s]
            Tkin (:obj:`float`): kinetic temperature in [K]
            Tbg (:obj:`float`): temperature of the black body background in [K].
                For Tbg=0, the mean Galactic background is used
            fmin, fmax (:obj:`float`): only lines in this frequency range
                [GHz] are included in the results
            collider_densities (dict): densities in [cm\ :sup:`-3`] of the
                collision partners. Allowed keys: 'H2', 'para-H2', 'ortho-H2',
                'e', 'H', 'He' and 'H+'
            geometry (:obj:`str`): 'uniform sphere', 'expanding sphere' or
                'plane parallel slab'. Defaults to 'uniform sphere'
            catalog (:obj:`str`): 'JPL' or 'COLOGNE'. Defaults to 'JPL'
            reduce (:obj:`bool`): eliminate the levels above 10*Tkin before
                solving the rate equations. Defaults to False
            data_store (radexsolver.molecule.MolecularDataStore): where the
                molecular data are loaded from. Defaults to a new store with
                the default data directory
            verbose (:obj:`bool`): print information about the iteration
        '''
        self.molecule = molecule
        self.column_density = column_density
        self.line_width = line_width
        self.Tkin = Tkin
        self.Tbg = Tbg
        self.fmin = fmin
        self.fmax = fmax
        self.collider_densities = collider_densities
        self.geometry = geometry
        self.catalog = catalog
        self.reduce = reduce
        self.data_store = MolecularDataStore() if data_store is None else data_store
        self.verbose = verbose
        self.warnings = WarningCollector()
        self.update()

    def check(self):
        '''Validates the public parameters.

        Returns:
            tuple: the SessionConfig and the list of warning messages
        '''
        return check_parameters(
                  molecule_id=self.molecule,column_density=self.column_density,
                  line_width=self.line_width,Tkin=self.Tkin,Tbg=self.Tbg,
                  fmin=self.fmin,fmax=self.fmax,
                  collider_densities=self.collider_densities,geometry=self.geometry,
                  catalog=self.catalog,reduce=self.reduce)

    def update(self):
        '''Validates the parameters and repeats the calculation.

        Raises:
            InvalidConfigurationError: invalid parameters
            DataFormatError: the molecular data cannot be read
            NoCollisionPartnerError: no collision rates for the given colliders
            ConvergenceError: the iteration did not converge within max_iter
        '''
        warnings = WarningCollector()
        config,messages = self.check()
        for message in messages:
            warnings.warn(message)
        emitting_molecule = self.data_store.load(config.molecule)
        crate,ctot,totdens = emitting_molecule.combined_rates(
                                   Tkin=config.Tkin,
                                   collider_densities=config.collider_densities,
                                   warnings=warnings)
        backi,trj,totalb = background.background_field(
                              xnu=emitting_molecule.xnu,Tbg=config.Tbg,
                              warnings=warnings)
        geometry = escape_probability.geometries[config.geometry]()
        rate_eq = rate_equations.RateEquations(
                      molecule=emitting_molecule,N=config.column_density,
                      width_v=config.width_v,Tkin=config.Tkin,crate=crate,ctot=ctot,
                      totdens=totdens,trj=trj,totalb=totalb,geometry=geometry,
                      reduce=config.reduce,underrelaxation=self.underrelaxation,
                      min_tau_considered_for_convergence=self.min_tau_considered_for_convergence,
                      very_thick_tau=self.very_thick_tau)
        n_iter = self.solve_rate_equations(rate_eq=rate_eq,warnings=warnings)
        if np.any(rate_eq.tau < 0):
            negative = [emitting_molecule.rad_transitions[i].name for i in
                        np.where(rate_eq.tau < 0)[0]]
            warnings.warn(f'negative optical depth (population inversion) for'
                          +f' transitions {", ".join(negative)}')
        beta = geometry.beta(rate_eq.tau)
        results = flux.synthesize(molecule=emitting_molecule,tau=rate_eq.tau,
                                  Tex=rate_eq.Tex,backi=backi,totalb=totalb,
                                  beta=beta,width_v=config.width_v,fmin=config.fmin,
                                  fmax=config.fmax)
        self.config = config
        self.emitting_molecule = emitting_molecule
        self.n_iter_convergence = n_iter
        self.level_pop = rate_eq.xpop
        self.tau = rate_eq.tau
        self.Tex = rate_eq.Tex
        self.background_intensity = backi
        self.results = results
        self.warnings = warnings

    def solve_rate_equations(self,rate_eq,warnings):
        '''Iterates the rate equations until convergence. Warnings are
        added to the WarningCollector warnings.

        Returns:
            int: the number of iterations
        '''
        rate_eq.initial_step()
        residual = np.inf
        for n_iter in range(1,self.max_iter+1):
            residual = rate_eq.step(n_iter=n_iter)
            if n_iter == 1 and rate_eq.n_very_thick > 0:
                warnings.warn(f'{rate_eq.n_very_thick} lines have very high'
                              +f' optical depth (tau > {self.very_thick_tau:g}),'
                              +' convergence may be difficult')
            if self.verbose and n_iter%10 == 0:
                print(f'iteration {n_iter}: residual {residual:.3g}'
                      +f' ({rate_eq.n_thick} thick lines)')
            if n_iter >= self.min_iter and residual < self.relative_convergence:
                if self.verbose:
                    print(f'converged in {n_iter} iterations')
                return n_iter
        raise ConvergenceError(f'no convergence after {self.max_iter} iterations'
                               +f' (residual {residual:.3g})',n_iter=self.max_iter)

    @property
    def n_transitions(self):
        '''number of transitions in the frequency range'''
        return len(self.results)

    def print_results(self):
        '''Prints the results of the lines within the frequency range.'''
        print('\n')
        print('      transition   nu0 [GHz]   E_up [K]   T_ex [K]        tau'
              +'   T_A [K]   T_R [K]  flux [K km/s]  flux [erg/s/cm2]')
        for line in self.results:
            output = f'{line.name:>16s} {line.frequency:>11.4f} {line.Eup:>10.1f} '\
                     +f'{line.Tex:>10.3f} {line.tau:>10.3e} {line.T_antenna:>9.3e} '\
                     +f'{line.T_R:>9.3e} {line.flux_Kkms:>14.4e} {line.flux_cgs:>17.4e}'
            print(output)
        print('\n')
