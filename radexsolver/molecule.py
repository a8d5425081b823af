# -*- coding: utf-8 -*-
"""
Molecular data: catalog tables, the Molecule class and the data store
"""
import os
import numpy as np
from radexsolver import LAMDA_file,atomic_transition,helpers
from radexsolver.exceptions import (InvalidConfigurationError,UnsupportedMoleculeError,
                                    DataFormatError,NoCollisionPartnerError)

#names of the available molecules / atoms; the data file of a molecule is
#the lower-cased name plus '.dat'
molecule_names = ['13CO','13CS','29SiO','C','C+','C17O','C18O','C34S','CO','CS',
                  'DCO+','e-CH3OH','H13CN','H13CO+','HC15N','HC17O+','HC18O+','HC3N',
                  'HCl_hfs','HCl','HCN_hfs','HCN','HCO+','HCS+','HDO','HNC','HNCO',
                  'N2H+_hfs','N2H+','o-C3H2','o-H2CO','o-H2O_lowT','o-H2O','o-H3O+',
                  'o-NH3','o-SiC2','O','OCS','OH_hfs','OH','p-C3H2','p-H2CO',
                  'p-H2O_lowT','p-H2O','p-H3O+','p-NH3','SiO','SiS','SO','SO2','N2D+',
                  'NO','CN','CH3CN','HF','HOC+']

#catalog entries ("tag name") of each molecule; 'NULL' means that the molecule
#cannot be used with that catalog
catalog_names = {
    'JPL':['29001 C-13-O','45001 C-13-S','45002 Si-29-O','12001 C-atom','NULL',
           '29006 CO-17','30001 CO-18','46001 CS-34','28001 CO','44001 CS','30003 DCO+',
           '32003 CH3OH','28002 HC-13-N','30002 HC-13-O+','28003 HCN-15','NULL',
           '31001 HCO-18+','51001 HCCCN','36001 HCl','NULL','NULL','27001 HCN',
           '29002 HCO+','45005 HCS+','19002 HDO','27002 HNC','43002 HNCO','NULL',
           '29005 NNH+','38002 c-C3H2','30004 H2CO','NULL','18003 H2O','19004 H3O+',
           '17002 NH3','52007 SiCC','16001 O-atom','60001 OCS','17001 OH','NULL',
           '38002 c-C3H2','30004 H2CO','NULL','18003 H2O','19004 H3O+','17002 NH3',
           '44002 SiO','60002 SiS','48001 SO','64002 SO2','30009 NND+','30008 NO',
           '26001 CN','41001 CH3CN','20002 HF','29007 HOC+'],
    'COLOGNE':['29501 C-13-O','45501 C-13-S','45504 Si-29-O','12501 C-atom','NULL',
               '29503 CO-17','30502 CO-18','46501 CS-34','28503 CO','44501 CS',
               '30510 DCO+','32504 *CH3OH','28501 HC-13-N','30504 HC-13-O+',
               '28506 HCN-15','NULL','31506 HCO-18+','51501 HC3N','NULL','NULL','NULL',
               '27501 HCN','29507 HCO+','45506 HCS+','NULL','27502 HNC','NULL','NULL',
               '29506 N2H+','38501 l-C3H2','30501 H2CO','NULL','NULL','NULL','NULL',
               '52527 SiC2','NULL','60503 OCS','NULL','NULL','38501 l-C3H2',
               '30501 H2CO','NULL','NULL','NULL','NULL','44505 SiO','60506 SiS',
               '48501 SO','64502 SO2','30509 N2D+','NULL','26504 CN','41505 CH3CN',
               'NULL','29504 HOC+']}

#with the JPL catalog, the lowest transitions of these molecules are only
#resolved in the hyperfine data file: molecule -> (hfs molecule, fmax limit [GHz])
hyperfine_substitutions = {'N2H+':('N2H+_hfs',100.),'HCN':('HCN_hfs',180.)}

colliders = tuple(LAMDA_file.LAMDA_coll_ID.values())


def molecule_index(molecule):
    '''Returns the index of a molecule in molecule_names. The molecule can be
    given either by its index or by its name (case insensitive if the exact
    name is not found).'''
    if isinstance(molecule,(int,np.integer)):
        if not 0 <= molecule < len(molecule_names):
            raise InvalidConfigurationError(f'invalid molecule {molecule}',
                                            field='molecule',value=molecule)
        return int(molecule)
    if molecule in molecule_names:
        return molecule_names.index(molecule)
    lower_names = [name.lower() for name in molecule_names]
    if str(molecule).lower() in lower_names:
        return lower_names.index(str(molecule).lower())
    raise UnsupportedMoleculeError(f'unknown molecule {molecule}',field='molecule',
                                   value=molecule)

def catalog_name(molecule,catalog):
    '''Returns the catalog entry of a molecule.

    Raises:
        UnsupportedMoleculeError: if the molecule is not available with the catalog
    '''
    if catalog not in catalog_names:
        raise InvalidConfigurationError(f'unknown catalog {catalog}',field='catalog',
                                        value=catalog)
    name = catalog_names[catalog][molecule_index(molecule)]
    if name == 'NULL':
        raise UnsupportedMoleculeError(
                f'the combination of catalog {catalog} and molecule {molecule}'
                +' is incompatible',field='molecule',value=molecule)
    return name

def molecule_index_from_catalog(name,catalog,freq,data_store):
    '''Finds the index of the molecule corresponding to a catalog entry.

    Args:
        name (:obj:`str`): the name (or part of it) of the molecule as given in
            the catalog, for example '28001 CO' or 'HCO+'
        catalog (:obj:`str`): 'JPL' or 'COLOGNE'
        freq (:obj:`float`): frequency in [GHz] of the line of interest. If
            several molecules share the catalog entry (e.g. ortho and para
            species), the one with a transition closest to freq is returned
        data_store (MolecularDataStore): used to read the transition frequencies
            of the candidates

    Returns:
        int: index into molecule_names
    '''
    if catalog not in catalog_names:
        raise InvalidConfigurationError(f'unknown catalog {catalog}',field='catalog',
                                        value=catalog)
    entries = catalog_names[catalog]
    matches = [i for i,entry in enumerate(entries) if entry != 'NULL' and name in entry]
    if len(matches) == 0:
        raise UnsupportedMoleculeError(f'{name} not found in catalog {catalog}',
                                       field='molecule',value=name)
    candidates = [i for i,entry in enumerate(entries) if entry==entries[matches[0]]]
    if len(candidates) == 1:
        return candidates[0]
    min_distances = [np.min(np.abs(data_store.load(molecule_names[i]).nu0-freq))
                     for i in candidates]
    return candidates[np.argmin(min_distances)]


class CollisionRateTable():

    r'''Tabulated downward collision rate coefficients of one collision partner.

    Attributes:
        collider (:obj:`str`): name of the collision partner
        nup (numpy.ndarray): upper level index of each collisional transition
        nlow (numpy.ndarray): lower level index of each collisional transition
        Tkin_data (numpy.ndarray): tabulated temperatures in [K]
        K21_data (numpy.ndarray): rate coefficients in [cm\ :sup:`3`/s], shape
            (number of collisional transitions, number of temperatures)
    '''

    def __init__(self,collider,transitions):
        self.collider = collider
        self.nup = np.array([trans.up.number for trans in transitions],dtype=int)
        self.nlow = np.array([trans.low.number for trans in transitions],dtype=int)
        self.Tkin_data = transitions[0].Tkin_data
        self.K21_data = np.array([trans.K21_data for trans in transitions])

    def downward_rates(self,Tkin,n_levels):
        '''Matrix of downward rate coefficients [upper level, lower level] at
        Tkin, and the flag returned by atomic_transition.interpolate_K21'''
        K21,flag = atomic_transition.interpolate_K21(
                        Tkin=Tkin,Tkin_data=self.Tkin_data,K21_data=self.K21_data)
        rates = np.zeros((n_levels,n_levels))
        rates[self.nup,self.nlow] = K21
        return rates,flag


class Molecule():

    '''Represents an atom or molecule with data read from a LAMDA file

    Attributes:
        name (:obj:`str`): name of the molecule
        levels (list of radexsolver.atomic_transition.Level): the energy levels,
            in the same order as in the LAMDA file
        rad_transitions (list of radexsolver.atomic_transition.RadiativeTransition):
            the radiative transitions, in the same order as in the LAMDA file
        coll_transitions (dict): the collisional transitions for each collider
        rate_tables (dict): CollisionRateTable for each collider
        n_levels (:obj:`int`): the total number of levels
        n_rad_transitions (:obj:`int`): the total number of radiative transitions
    '''

    def __init__(self,name,data):
        self.name = name
        self.levels = data['levels']
        self.rad_transitions = data['radiative transitions']
        self.coll_transitions = data['collisional transitions']
        self.n_levels = len(self.levels)
        self.n_rad_transitions = len(self.rad_transitions)
        #collecting parameters as arrays for the numerical parts:
        self.E = np.array([level.E for level in self.levels])
        self.g = np.array([level.g for level in self.levels])
        self.nup = np.array([line.up.number for line in self.rad_transitions],dtype=int)
        self.nlow = np.array([line.low.number for line in self.rad_transitions],
                             dtype=int)
        self.A21 = np.array([line.A21 for line in self.rad_transitions])
        self.nu0 = np.array([line.nu0 for line in self.rad_transitions])
        self.Eup = np.array([line.Eup for line in self.rad_transitions])
        self.xnu = np.array([line.Delta_E for line in self.rad_transitions])
        self.gup = self.g[self.nup]
        self.glow = self.g[self.nlow]
        self.rate_tables = {collider:CollisionRateTable(collider=collider,
                                                        transitions=transitions)
                            for collider,transitions in self.coll_transitions.items()
                            if len(transitions) > 0}

    @classmethod
    def from_LAMDA_file(cls,datafilepath,name=None):
        data = LAMDA_file.read(datafilepath)
        return cls(name=data['molecule'] if name is None else name,data=data)

    def thermal_H2_split(self,Tkin,collider_densities):
        '''Returns True if a total H2 density needs to be split into its
        ortho and para components to use the rate tables of this molecule'''
        if 'H2' in self.rate_tables:
            return False
        if 'para-H2' not in self.rate_tables and 'ortho-H2' not in self.rate_tables:
            return False
        return (collider_densities.get('H2',0) > helpers.EPS
                and collider_densities.get('para-H2',0) < helpers.EPS
                and collider_densities.get('ortho-H2',0) < helpers.EPS)

    def combined_rates(self,Tkin,collider_densities,warnings):
        r'''Combines the collision rates of all colliders, weighted by their
        density.

        Args:
            Tkin (:obj:`float`): kinetic temperature in [K]
            collider_densities (dict): densities in [cm\ :sup:`-3`] of the
                colliders, with collider names as keys
            warnings (radexsolver.exceptions.WarningCollector): receives the
                warnings about the tabulated temperature range

        Returns:
            tuple: the collision rate matrix crate (crate[i,j] is the rate in
            [s\ :sup:`-1`] from level i to level j), the total collision rate
            out of each level and the total density of colliders
        '''
        totdens = sum(collider_densities.values())
        densities = dict(collider_densities)
        if self.thermal_H2_split(Tkin=Tkin,collider_densities=collider_densities):
            opr = min(3.,9.*np.exp(-170.6/Tkin))
            densities['para-H2'] = densities['H2']/(opr+1)
            densities['ortho-H2'] = densities['H2']/(1+1/opr)
            warnings.warn(f'{self.name}: total H2 density split into para- and'
                          +f' ortho-H2 using the thermal ortho/para ratio {opr:.3g}')
        crate = np.zeros((self.n_levels,self.n_levels))
        found = False
        for collider,table in self.rate_tables.items():
            density = densities.get(collider,0)
            if not density > 0:
                continue
            found = True
            rates,flag = table.downward_rates(Tkin=Tkin,n_levels=self.n_levels)
            if flag > 0:
                warnings.warn(f'{self.name}, {collider}: kinetic temperature higher'
                              +' than temperatures for which collisional rates'
                              +' are present')
            elif flag < 0:
                warnings.warn(f'{self.name}, {collider}: kinetic temperature lower'
                              +' than temperatures for which collisional rates'
                              +' are present')
            crate += density*rates
        if not found:
            raise NoCollisionPartnerError(
                     f'{self.name}: no rates found for any of the colliders'
                     +f' {list(collider_densities.keys())}')
        #upward rates from detailed balance
        Delta_E = self.E[:,np.newaxis] - self.E[np.newaxis,:]
        x = helpers.fk*Delta_E/Tkin
        upward = (Delta_E > 0) & (x < helpers.MAX_EXP_ARGUMENT)
        boltzmann = np.where(upward,np.exp(-np.clip(x,0,helpers.MAX_EXP_ARGUMENT)),0)
        upward_rates = self.g[:,np.newaxis]/self.g[np.newaxis,:]*boltzmann*crate
        crate = np.where((Delta_E>0).T,upward_rates.T,crate)
        ctot = crate.sum(axis=1)
        return crate,ctot,totdens


class MolecularDataStore():

    '''Loads molecules on request and keeps them in memory.

    Args:
        data_directory (:obj:`str`): directory containing the LAMDA files,
            named as the lower-cased molecule name plus '.dat'. Defaults to
            the environment variable RADEXSOLVER_DATA or, if not set, the
            'data' directory of the package.
        loader (func): optional function of one argument (the molecule name)
            that returns the molecule data as returned by LAMDA_file.read.
            Replaces reading from data_directory.
    '''

    def __init__(self,data_directory=None,loader=None):
        if data_directory is None:
            default = os.path.join(os.path.dirname(os.path.abspath(__file__)),'data')
            data_directory = os.environ.get('RADEXSOLVER_DATA',default)
        self.data_directory = data_directory
        self.loader = self.read_file if loader is None else loader
        self.molecules = {}

    def filepath(self,name):
        return os.path.join(self.data_directory,name.lower()+'.dat')

    def read_file(self,name):
        return LAMDA_file.read(self.filepath(name))

    def load(self,molecule,catalog=None):
        '''Returns the Molecule instance of a molecule given by name or index.
        If catalog is given, the molecule must be available with that catalog.

        Raises:
            UnsupportedMoleculeError: unknown molecule or incompatible catalog
            DataFormatError: the data are missing or cannot be parsed
        '''
        name = molecule_names[molecule_index(molecule)]
        if catalog is not None:
            catalog_name(name,catalog)
        if name not in self.molecules:
            data = self.loader(name)
            if data is None:
                raise DataFormatError(f'no data found for molecule {name}')
            self.molecules[name] = Molecule(name=name,data=data)
        return self.molecules[name]
