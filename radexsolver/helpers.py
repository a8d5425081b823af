# -*- coding: utf-8 -*-

import numpy as np
from scipy import constants
import numba as nb

#RADEX works in CGS units: energies as wavenumbers in [cm-1], intensities
#in [erg/s/cm2/Hz/sr]
h = constants.h/constants.erg
c = constants.c/constants.centi
k = constants.k/constants.erg
#converts a wavenumber in [cm-1] to a temperature in [K]
fk = h*c/k
thc = 2*h*c
#Gaussian line: integrated over the profile, 1.0645*FWHM
fgaus = 1.0645*8*np.pi
#wavenumber [cm-1] to frequency [GHz]
wavenumber_to_GHz = c/constants.giga

#round-off error; also used as floor for intensities
EPS = 1e-30
#minimum fractional level population
MIN_POP = 1e-20
#Boltzmann factors exp(-x) with x above this value are treated as zero
MAX_EXP_ARGUMENT = 160


@nb.jit(nopython=True,cache=True)
def occupation_number(xnu,T):
    '''Photon occupation number 1/(exp(h*nu/(k*T))-1) for wavenumbers xnu [cm-1]
    and temperatures T [K]. Zero where the exponent is above MAX_EXP_ARGUMENT.'''
    n = np.zeros(xnu.size)
    for i in range(xnu.size):
        x = fk*xnu[i]/T[i]
        if x < MAX_EXP_ARGUMENT:
            n[i] = 1/(np.exp(x)-1)
    return n

@nb.jit(nopython=True,cache=True)
def B_nu(xnu,T):
    r"""Planck function (black body)

    Args:
        xnu (numpy.ndarray): wavenumber in [cm\ :sup:`-1`]
        T (:obj:`float`): temperature in [K]

    Returns:
        numpy.ndarray: value of Planck function in [erg/s/cm\ :sup:`2`/Hz/sr].
        Where h*nu/(k*T) exceeds MAX_EXP_ARGUMENT, the floor value EPS is returned
        instead of zero.
    """
    intensity = np.empty(xnu.size)
    for i in range(xnu.size):
        x = fk*xnu[i]/T
        if x >= MAX_EXP_ARGUMENT:
            #a zero intensity propagates into log(0) for Tex and tau
            intensity[i] = EPS
        else:
            intensity[i] = thc*xnu[i]**3/(np.exp(x)-1)
    return intensity

@nb.jit(nopython=True,cache=True)
def brightness_temperature(intensity,xnu):
    r'''Inverts the Planck function.

    Args:
        intensity (numpy.ndarray): intensity in [erg/s/cm\ :sup:`2`/Hz/sr]
        xnu (numpy.ndarray): wavenumber in [cm\ :sup:`-1`]

    Returns:
        numpy.ndarray: the temperature in [K] of a black body emitting the
        given intensity (infinite if the intensity is so large that
        thc*xnu**3/intensity vanishes). Zero intensity is replaced by the floor EPS;
        negative intensities (possible for inverted lines) are converted
        with the Rayleigh-Jeans approximation.
    '''
    T = np.empty(xnu.size)
    for i in range(xnu.size):
        I = intensity[i]
        if I == 0:
            I = EPS
        wh = thc*xnu[i]**3/I + 1
        if wh <= 0:
            T[i] = I/(thc*xnu[i]**2/fk)
        elif wh == 1:
            #intensity too large to be resolved
            T[i] = np.inf
        else:
            T[i] = fk*xnu[i]/np.log(wh)
    return T

@nb.jit(nopython=True,cache=True)
def assert_all_finite(x):
    assert np.all(np.isfinite(x))
