# -*- coding: utf-8 -*-
"""
Tests of the observable line quantities
"""
import os
from radexsolver import flux,helpers,molecule
import numpy as np

here = os.path.dirname(os.path.abspath(__file__))
lamda_folder = os.path.join(here,'LAMDA_files')
co = molecule.Molecule.from_LAMDA_file(os.path.join(lamda_folder,'co.dat'),name='CO')
xnu = np.array((3.845,11.53,1000))


def test_frequency_margin():
    assert flux.frequency_margin('CO') == flux.default_margin
    assert flux.frequency_margin('N2H+_hfs') == flux.hfs_margin
    assert flux.frequency_margin('HCN_hfs') == flux.hfs_margin

def test_is_in_range():
    fmin,fmax = 100,120
    for freq in (fmin,fmax,110):
        assert flux.is_in_range(freq=freq,fmin=fmin,fmax=fmax)
    #lines close to the limits are kept
    assert flux.is_in_range(freq=99.995,fmin=fmin,fmax=fmax)
    assert flux.is_in_range(freq=120.005,fmin=fmin,fmax=fmax)
    for freq in (99.98,120.02,50,500):
        assert not flux.is_in_range(freq=freq,fmin=fmin,fmax=fmax)

def test_is_in_range_hyperfine():
    margin = flux.frequency_margin('N2H+_hfs')
    fmin,fmax = 100,120
    assert flux.is_in_range(freq=fmin,fmin=fmin,fmax=fmax,margin=margin)
    assert flux.is_in_range(freq=99.9999995,fmin=fmin,fmax=fmax,margin=margin)
    assert not flux.is_in_range(freq=99.999,fmin=fmin,fmax=fmax,margin=margin)
    assert not flux.is_in_range(freq=120.001,fmin=fmin,fmax=fmax,margin=margin)

def test_source_function():
    Tex = np.array((10,20,30))
    assert np.allclose(flux.source_function(xnu=xnu,Tex=Tex),
                       [helpers.B_nu(np.array((x,)),float(T))[0] for x,T in zip(xnu,Tex)],
                       rtol=1e-12,atol=0)
    #extremely low excitation temperature
    assert flux.source_function(xnu=np.array((1000.,)),Tex=np.array((1.,)))[0] == 0

def test_antenna_temperature_zero_if_Tex_equals_Tbg():
    Tbg = 2.73
    xnu_low = xnu[:2]
    backi = helpers.B_nu(xnu_low,Tbg)
    for tau in (0.1,1,100):
        ta = flux.antenna_temperature(xnu=xnu_low,tau=np.ones(2)*tau,
                                      Tex=np.ones(2)*Tbg,backi=backi)
        assert np.allclose(ta,0,atol=1e-10)

def test_antenna_temperature_background_not_subtracted_at_high_frequency():
    #the background temperature is small compared to h*nu/k
    Tbg = 20
    x = np.array((1000.,))
    backi = helpers.B_nu(x,Tbg)
    assert Tbg/(helpers.fk*x[0]) < 0.02
    ta = flux.antenna_temperature(xnu=x,tau=np.array((1e3,)),Tex=np.array((Tbg,)),
                                  backi=backi)
    assert ta[0] > 0
    assert np.isclose(ta[0],backi[0]/(helpers.thc*x[0]**2/helpers.fk),rtol=1e-10)

def test_antenna_temperature_thick_line():
    Tbg = 2.73
    Tex = np.array((20.,20.))
    x = xnu[:2]
    backi = helpers.B_nu(x,Tbg)
    ta = flux.antenna_temperature(xnu=x,tau=np.array((1e3,1e3)),Tex=Tex,backi=backi)
    expected = (flux.source_function(xnu=x,Tex=Tex)-backi)\
                  /(helpers.thc*x**2/helpers.fk)
    assert np.allclose(ta,expected,rtol=1e-10,atol=0)
    thin = flux.antenna_temperature(xnu=x,tau=np.array((1e-3,1e-3)),Tex=Tex,
                                    backi=backi)
    assert np.all(thin > 0)
    assert np.all(thin < ta)

def test_radiation_temperature():
    Tbg = 2.73
    Tex = np.array((10.,15.,50.))
    totalb = helpers.B_nu(xnu,Tbg)
    T_R = flux.radiation_temperature(xnu=xnu,Tex=Tex,totalb=totalb,beta=np.ones(3))
    assert np.allclose(T_R[:2],Tbg,rtol=1e-10)
    T_R = flux.radiation_temperature(xnu=xnu,Tex=Tex,totalb=totalb,beta=np.zeros(3))
    assert np.allclose(T_R,Tex,rtol=1e-10)

def test_synthesize():
    n = co.n_rad_transitions
    tau = np.linspace(0.1,3,n)
    Tex = np.linspace(5,15,n)
    backi = helpers.B_nu(co.xnu,2.73)
    beta = np.ones(n)*0.5
    width_v = 2e5
    results = flux.synthesize(molecule=co,tau=tau,Tex=Tex,backi=backi,totalb=backi,
                              beta=beta,width_v=width_v,fmin=200,fmax=400)
    assert [line.name for line in results] == ['2-1','3-2']
    for line,i in zip(results,(1,2)):
        assert line.up == i+1
        assert line.low == i
        assert line.frequency == co.nu0[i]
        assert line.Eup == co.Eup[i]
        assert line.tau == tau[i]
        assert line.Tex == Tex[i]
        assert np.isclose(line.flux_Kkms,1.0645*width_v*line.T_antenna/1e5)
        assert np.isclose(line.flux_cgs,helpers.fgaus*helpers.k*width_v
                          *line.T_antenna*co.xnu[i]**3)
        assert line.T_antenna > 0
        assert Tex[i] > line.T_R > 2.73

def test_synthesize_empty_range():
    n = co.n_rad_transitions
    results = flux.synthesize(molecule=co,tau=np.ones(n),Tex=np.ones(n)*10,
                              backi=helpers.B_nu(co.xnu,2.73),
                              totalb=helpers.B_nu(co.xnu,2.73),beta=np.ones(n),
                              width_v=1e5,fmin=2000,fmax=3000)
    assert results == []
