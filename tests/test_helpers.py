# -*- coding: utf-8 -*-
"""
Tests of the CGS constants and the Planck function helpers
"""
from radexsolver import helpers
import numpy as np
from scipy import constants


xnu = np.array((3.845033413,7.68,50.,1000.))

def test_constants():
    #h*c/k in cm*K
    assert np.isclose(helpers.fk,1.4387769,rtol=1e-6)
    assert np.isclose(helpers.thc,2*6.62607015e-27*2.99792458e10,rtol=1e-9)
    assert np.isclose(3.845033413*helpers.wavenumber_to_GHz,115.2712,rtol=1e-5)
    assert np.isclose(helpers.k,constants.k*1e7)

def test_B_nu_floor():
    T = 2.73
    I = helpers.B_nu(xnu,T)
    x = helpers.fk*xnu/T
    assert np.all(x[:3] < helpers.MAX_EXP_ARGUMENT)
    expected = helpers.thc*xnu[:3]**3/(np.exp(x[:3])-1)
    assert np.allclose(I[:3],expected,atol=0,rtol=1e-12)
    assert x[3] >= helpers.MAX_EXP_ARGUMENT
    assert I[3] == helpers.EPS

def test_brightness_temperature_inverts_B_nu():
    for T in (2.73,10,100):
        I = helpers.B_nu(xnu[:3],T)
        assert np.allclose(helpers.brightness_temperature(I,xnu[:3]),T,atol=0,
                           rtol=1e-10)

def test_brightness_temperature_of_zero_intensity():
    T = helpers.brightness_temperature(np.zeros(2),xnu[:2])
    assert np.all(np.isfinite(T))
    assert np.all(T > 0)
    assert np.all(T < 1)

def test_brightness_temperature_negative_intensity():
    I = np.array((-1e-15,))
    T = helpers.brightness_temperature(I,xnu[:1])
    assert np.isclose(T[0],I[0]/(helpers.thc*xnu[0]**2/helpers.fk))

def test_brightness_temperature_of_huge_intensity():
    T = helpers.brightness_temperature(np.array((1e12,)),np.array((1.,)))
    assert T[0] == np.inf

def test_occupation_number():
    T = np.array((2.73,2.73,10,0.01))
    n = helpers.occupation_number(xnu,T)
    assert np.isclose(n[0],1/(np.exp(helpers.fk*xnu[0]/T[0])-1))
    assert n[-1] == 0
