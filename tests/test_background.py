# -*- coding: utf-8 -*-
"""
Tests of the background radiation field
"""
from radexsolver import background,helpers
from radexsolver.exceptions import (InvalidConfigurationError,RadexWarning,
                                    WarningCollector)
import numpy as np
import pytest

#CO 1-0, 3-2, a far-infrared and a near-infrared line
xnu = np.array((3.845033413,11.534919938,500.,20000.))


def test_black_body():
    Tbg = 2.73
    collector = WarningCollector()
    backi,trj,totalb = background.background_field(xnu=xnu,Tbg=Tbg,warnings=collector)
    assert np.allclose(backi,helpers.B_nu(xnu,Tbg))
    assert np.all(trj == Tbg)
    assert np.all(totalb == backi)
    #Wien tail: floor value instead of zero
    assert backi[-1] == helpers.EPS
    assert len(collector) == 0

def test_black_body_integer_temperature():
    backi,trj,totalb = background.background_field(xnu=xnu[:2],Tbg=20,
                                                   warnings=WarningCollector())
    assert np.allclose(helpers.brightness_temperature(backi,xnu[:2]),20)
    assert trj.dtype == float

def test_negative_temperature():
    with pytest.raises(InvalidConfigurationError) as excinfo:
        background.background_field(xnu=xnu,Tbg=-1,warnings=WarningCollector())
    assert excinfo.value.field == 'Tbg'

def test_galactic_background():
    collector = WarningCollector()
    backi,trj,totalb = background.background_field(xnu=xnu,Tbg=0,warnings=collector)
    assert np.all(backi > 0)
    assert np.all(totalb == backi)
    #at millimetre wavelengths, the CMB dominates
    assert np.allclose(trj[:2],background.T_CMB,rtol=2e-3)
    assert np.allclose(helpers.brightness_temperature(backi,xnu),trj)
    assert len(collector) == 0

def test_galactic_background_segments():
    #one wavenumber in each segment of the fit
    x = np.array((5.,50.,500.,2000.,6000.,10000.,20000.,50000.,70000.,100000.))
    intensity = background.galactic_intensity(x)
    assert np.all(intensity > 0)
    assert np.all(np.isfinite(intensity))

def test_beyond_lyman_limit():
    x = np.array((3.845033413,2e5))
    collector = WarningCollector()
    with pytest.warns(RadexWarning,match='Lyman'):
        backi,trj,totalb = background.background_field(xnu=x,Tbg=0,warnings=collector)
    assert len(collector) == 1
    assert backi[1] == helpers.EPS
    assert np.all(np.isfinite(trj))
    assert trj[1] > 0
