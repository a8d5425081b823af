# -*- coding: utf-8 -*-
"""
Escape probability of line photons for the cloud geometries supported by RADEX
"""
import numpy as np
from radexsolver import escape_probability_functions
from radexsolver.exceptions import InvalidConfigurationError


class UniformSphere():

    '''Represents the escape probability from a static, uniform spherical medium
    (Osterbrock 1974)'''

    def __init__(self):
        self.beta = escape_probability_functions.beta_uniform_sphere


class ExpandingSphere():

    '''Represents the escape probability from an expanding sphere (large velocity
    gradient / Sobolev approximation)'''

    def __init__(self):
        self.beta = escape_probability_functions.beta_expanding_sphere


class PlaneParallelSlab():

    '''Represents the escape probability from a plane parallel slab, appropriate
    for example for shocks'''

    def __init__(self):
        self.beta = escape_probability_functions.beta_plane_parallel_slab


geometries = {'uniform sphere':UniformSphere,
              'expanding sphere':ExpandingSphere,
              'plane parallel slab':PlaneParallelSlab}


def escape_probability(tau,geometry):
    '''Computes the escape probability.

    Args:
        tau (:obj:`float` or numpy.ndarray): optical depth
        geometry (:obj:`str`): 'uniform sphere', 'expanding sphere' or
            'plane parallel slab'

    Returns:
        :obj:`float` or numpy.ndarray: the escape probability, between 0 and 1
    '''
    if geometry not in geometries:
        raise InvalidConfigurationError(f'unknown geometry {geometry}',
                                        field='geometry',value=geometry)
    tau = np.array(tau,dtype=float)
    beta = geometries[geometry]().beta(np.atleast_1d(tau).ravel())
    if tau.ndim == 0:
        return beta[0]
    return beta.reshape(tau.shape)
