# -*- coding: utf-8 -*-
"""
Numba-compiled escape probability functions of the three RADEX geometries
"""

import numba as nb
import numpy as np
from radexsolver import helpers

#The functions are compiled with numba, so they have to be defined outside the
#classes in escape_probability.py.
#All geometries use a variable y proportional to the optical depth and switch
#between a series expansion (small |y|), the closed formula and an asymptotic
#form (large |y|).

min_reliable_tau = -1

@nb.jit(nopython=True,cache=True)
def clip_prob(prob):
    return np.where(prob>1,1.,np.where(prob<0,0.,prob))

####### uniform sphere (y = optical radius = tau/2) ######

@nb.jit(nopython=True,cache=True)
def beta_series_uniform_sphere(y):
    return 1 - 0.75*y + y**2/2.5 - y**3/6 + y**4/17.5

@nb.jit(nopython=True,cache=True)
def beta_analytical_uniform_sphere(y):
    #Osterbrock (1974), appendix 2, with the optical radius y
    return 0.75/y*(1-1/(2*y**2)+(1/y+1/(2*y**2))*np.exp(-2*y))

@nb.jit(nopython=True,cache=True)
def beta_large_tau_uniform_sphere(y):
    return 0.75/y

####### expanding sphere, LVG (y = tau/2) ######

#de Jong, Boland & Dalgarno (1980), corrected by a factor 2 to have beta(0)=1

@nb.jit(nopython=True,cache=True)
def beta_series_expanding_sphere(y):
    x = 2.34*y
    return 1 - x/2 + x**2/6 - x**3/24

@nb.jit(nopython=True,cache=True)
def beta_analytical_expanding_sphere(y):
    return (1-np.exp(-2.34*y))/(2.34*y)

@nb.jit(nopython=True,cache=True)
def beta_large_tau_expanding_sphere(y):
    return 2/(y*4*np.sqrt(np.log(y/np.sqrt(np.pi))))

####### plane parallel slab (y = 3*tau) ######

#de Jong, Dalgarno & Chu (1975)

@nb.jit(nopython=True,cache=True)
def beta_series_slab(y):
    return 1 - y/2 + y**2/6 - y**3/24 + y**4/120

@nb.jit(nopython=True,cache=True)
def beta_analytical_slab(y):
    return (1-np.exp(-y))/y

@nb.jit(nopython=True,cache=True)
def beta_large_tau_slab(y):
    return 1/y

def generate_beta(beta_series,beta_analytical,beta_large_tau,tau_scale,
                  series_limit,large_tau_limit):
    @nb.jit(nopython=True,cache=True)
    def beta(tau_nu):
        #|y| selects the approximation, which is evaluated at the signed y;
        #for strongly negative tau (inverted population), abs(tau) is used
        prob = np.empty(tau_nu.size)
        for i in range(tau_nu.size):
            tau = tau_nu[i]
            if tau < min_reliable_tau:
                tau = -tau
            y = tau_scale*tau
            if np.abs(y) < series_limit:
                prob[i] = beta_series(y)
            elif np.abs(y) > large_tau_limit:
                prob[i] = beta_large_tau(y)
            else:
                prob[i] = beta_analytical(y)
        helpers.assert_all_finite(prob)
        return clip_prob(prob)
    return beta

beta_uniform_sphere = generate_beta(
                         beta_series=beta_series_uniform_sphere,
                         beta_analytical=beta_analytical_uniform_sphere,
                         beta_large_tau=beta_large_tau_uniform_sphere,
                         tau_scale=0.5,series_limit=0.1,large_tau_limit=50.)
beta_expanding_sphere = generate_beta(
                         beta_series=beta_series_expanding_sphere,
                         beta_analytical=beta_analytical_expanding_sphere,
                         beta_large_tau=beta_large_tau_expanding_sphere,
                         tau_scale=0.5,series_limit=0.01,large_tau_limit=7.)
beta_plane_parallel_slab = generate_beta(
                         beta_series=beta_series_slab,
                         beta_analytical=beta_analytical_slab,
                         beta_large_tau=beta_large_tau_slab,
                         tau_scale=3.,series_limit=0.1,large_tau_limit=50.)
