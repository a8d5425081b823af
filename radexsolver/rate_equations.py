# -*- coding: utf-8 -*-
"""
Statistical equilibrium of the level populations, solved iteratively with
escape probabilities
"""

import numba as nb
import numpy as np
from radexsolver import helpers
from radexsolver.exceptions import ConvergenceError


@nb.jit(nopython=True,cache=True)
def add_radiative_rates(Y,nup,nlow,A21,gup,glow,beta,exr):
    '''Adds the radiative rates to the rate matrix Y (Y[i,i] is the total rate
    out of level i, Y[i,j] minus the rate from level j into level i). exr is the
    photon occupation number of the radiation field in each line.'''
    for i in range(nup.size):
        m = nup[i]
        n = nlow[i]
        Y[m,m] += A21[i]*(beta[i]+exr[i])
        Y[n,n] += A21[i]*gup[i]/glow[i]*exr[i]
        Y[m,n] -= A21[i]*gup[i]/glow[i]*exr[i]
        Y[n,m] -= A21[i]*(beta[i]+exr[i])

@nb.jit(nopython=True,cache=True)
def fast_tau(cddv,xpop,nup,nlow,A21,gup,glow,xnu):
    n_lines = nup.size
    tau = np.empty(n_lines)
    for i in range(n_lines):
        xt = xnu[i]**3
        tau[i] = cddv*(xpop[nlow[i]]*gup[i]/glow[i]-xpop[nup[i]])\
                  /(helpers.fgaus*xt/A21[i])
    return tau

@nb.jit(nopython=True,cache=True)
def fast_Tex(xpop,nup,nlow,gup,glow,xnu,fallback):
    '''excitation temperatures; where one of the two levels has a population
    at or below MIN_POP, the fallback value is used; equal populations per
    statistical weight give an infinite excitation temperature'''
    n_lines = nup.size
    Tex = np.empty(n_lines)
    for i in range(n_lines):
        x_up = xpop[nup[i]]
        x_low = xpop[nlow[i]]
        if x_low <= helpers.MIN_POP or x_up <= helpers.MIN_POP:
            Tex[i] = fallback[i]
        else:
            ratio = x_low*gup[i]/(x_up*glow[i])
            if ratio == 1:
                Tex[i] = np.inf
            else:
                Tex[i] = helpers.fk*xnu[i]/np.log(ratio)
    return Tex


class RateEquations():

    '''Assembles and solves the rate equations for one set of physical
    conditions.

    Attributes:
        xpop (numpy.ndarray): fractional population of each level
        tau (numpy.ndarray): optical depth of each radiative transition
        Tex (numpy.ndarray): excitation temperature of each radiative transition
        n_thick (:obj:`int`): number of lines that are optically thick
            (counted in the last iteration)
        n_very_thick (:obj:`int`): number of lines with very high optical depth
            (counted in the last iteration)
        residual (:obj:`float`): the convergence statistic of the last iteration
    '''

    def __init__(self,molecule,N,width_v,Tkin,crate,ctot,totdens,trj,totalb,
                 geometry,reduce=False,underrelaxation=0.3,
                 min_tau_considered_for_convergence=1e-2,very_thick_tau=1e5):
        r'''
        Args:
            molecule (radexsolver.molecule.Molecule): the molecule
            N (:obj:`float`): column density in [cm\ :sup:`-2`]
            width_v (:obj:`float`): line width (FWHM) in [cm/s]
            Tkin (:obj:`float`): kinetic temperature in [K]
            crate, ctot, totdens: the combined collision rates, as returned by
                molecule.Molecule.combined_rates
            trj (numpy.ndarray): brightness temperature of the background in [K]
            totalb (numpy.ndarray): total background intensity
            geometry: escape probability geometry (an instance of one of the
                classes in escape_probability)
            reduce (:obj:`bool`): whether to eliminate the levels above 10*Tkin
                before solving the linear system
        '''
        self.molecule = molecule
        self.cddv = N/width_v
        self.Tkin = Tkin
        self.trj = trj
        self.totalb = totalb
        self.geometry = geometry
        self.reduce = reduce
        self.underrelaxation = underrelaxation
        self.min_tau_considered_for_convergence = min_tau_considered_for_convergence
        self.very_thick_tau = very_thick_tau
        self.GammaC = self.collision_matrix(crate=crate,ctot=ctot,totdens=totdens)
        self.low_levels = np.where(molecule.E*helpers.fk <= 10*Tkin)[0]
        self.high_levels = np.where(molecule.E*helpers.fk > 10*Tkin)[0]
        n_lines = molecule.n_rad_transitions
        self.xpop = np.zeros(molecule.n_levels)
        self.tau = np.zeros(n_lines)
        self.Tex = np.zeros(n_lines)
        self.n_thick = 0
        self.n_very_thick = 0
        self.residual = np.inf

    @staticmethod
    def collision_matrix(crate,ctot,totdens):
        '''collisional part of the rate matrix, including the small
        regularisation term proportional to the total density'''
        n_levels = ctot.size
        GammaC = -helpers.EPS*totdens*np.ones((n_levels,n_levels))
        off_diagonal = ~np.eye(n_levels,dtype=bool)
        GammaC[off_diagonal] -= crate.T[off_diagonal]
        GammaC[np.diag_indices(n_levels)] += ctot
        return GammaC

    def rate_matrix(self,beta,exr):
        Y = self.GammaC.copy()
        mol = self.molecule
        add_radiative_rates(Y=Y,nup=mol.nup,nlow=mol.nlow,A21=mol.A21,gup=mol.gup,
                            glow=mol.glow,beta=beta,exr=exr)
        return Y

    @staticmethod
    def solve_full(Y):
        '''Solves Y*x=0 together with sum(x)=1, where the normalisation replaces
        the equation of the last level'''
        A = Y.copy()
        A[-1,:] = 1
        b = np.zeros(A.shape[0])
        b[-1] = 1
        return np.linalg.solve(A,b)

    def solve_reduced(self,Y):
        '''Eliminates the populations of the high levels (which are mostly
        populated by radiative cascades) and solves only for the low levels.'''
        L = self.low_levels
        H = self.high_levels
        if L.size == 0 or H.size == 0:
            return self.solve_full(Y)
        #x_H = M*x_L follows from the equations of the high levels
        M = -np.linalg.solve(Y[np.ix_(H,H)],Y[np.ix_(H,L)])
        S = Y[np.ix_(L,L)] + Y[np.ix_(L,H)] @ M
        S[-1,:] = 1 + M.sum(axis=0)
        b = np.zeros(L.size)
        b[-1] = 1
        x = np.empty(Y.shape[0])
        x[L] = np.linalg.solve(S,b)
        x[H] = M @ x[L]
        return x

    def solve(self,Y,n_iter):
        try:
            if self.reduce:
                x = self.solve_reduced(Y)
            else:
                x = self.solve_full(Y)
        except np.linalg.LinAlgError as err:
            raise ConvergenceError(f'singular rate matrix in iteration {n_iter}',
                                   n_iter=n_iter) from err
        if not np.all(np.isfinite(x)):
            raise ConvergenceError(f'non-finite level populations in iteration {n_iter}',
                                   n_iter=n_iter)
        return np.maximum(helpers.MIN_POP,x/np.sum(x))

    def compute_tau(self,xpop):
        mol = self.molecule
        return fast_tau(cddv=self.cddv,xpop=xpop,nup=mol.nup,nlow=mol.nlow,
                        A21=mol.A21,gup=mol.gup,glow=mol.glow,xnu=mol.xnu)

    def compute_Tex(self,xpop,fallback):
        mol = self.molecule
        return fast_Tex(xpop=xpop,nup=mol.nup,nlow=mol.nlow,gup=mol.gup,
                        glow=mol.glow,xnu=mol.xnu,fallback=fallback)

    def initial_step(self):
        '''Optically thin start: the lines only see the background radiation'''
        mol = self.molecule
        beta = np.ones(mol.n_rad_transitions)
        exr = helpers.occupation_number(mol.xnu,self.trj)
        Y = self.rate_matrix(beta=beta,exr=exr)
        self.xpop = self.solve(Y,n_iter=0)
        self.Tex = self.compute_Tex(xpop=self.xpop,fallback=self.trj)
        self.tau = np.zeros(mol.n_rad_transitions)

    def step(self,n_iter):
        '''One iteration with escape probabilities.

        Returns:
            float: the convergence statistic (mean relative change of the
            excitation temperature of the optically thick lines; 0 if there are
            no optically thick lines)
        '''
        mol = self.molecule
        self.tau = self.compute_tau(self.xpop)
        thick = self.tau > self.min_tau_considered_for_convergence
        self.n_thick = np.count_nonzero(thick)
        self.n_very_thick = np.count_nonzero(self.tau > self.very_thick_tau)
        beta = self.geometry.beta(self.tau)
        exr = self.totalb*beta/(helpers.thc*mol.xnu**3)
        Y = self.rate_matrix(beta=beta,exr=exr)
        xpop_old = self.xpop
        xpop_new = self.solve(Y,n_iter=n_iter)
        new_Tex = self.compute_Tex(xpop=xpop_new,fallback=self.Tex)
        if self.n_thick > 0:
            relative_change = np.abs((new_Tex-self.Tex)/new_Tex)
            self.residual = np.sum(relative_change[thick])/self.n_thick
        else:
            self.residual = 0.
        self.Tex = 0.5*(new_Tex+self.Tex)
        self.tau = self.compute_tau(xpop_new)
        self.xpop = self.underrelaxation*xpop_new\
                       + (1-self.underrelaxation)*xpop_old
        return self.residual
