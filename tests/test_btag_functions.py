import numpy as np
import pytest

from BTVReweighting.helpers.btag_functions import (
    BtagScale,
    CtagScale,
    LtagScale,
    BtagEfficiency,
    CtagEfficiency,
    LtagEfficiency,
    Curve,
    binned_table,
    find_bin,
)
from BTVReweighting.helpers.definitions import BtagType, LeptonSelection
from BTVReweighting.utils.BTV_parameters import btag_config

pts = np.linspace(0.0, 1500.0, 301)


def small_config(sfb="0.95+0*x", error=0.05, sfl_min="0.9+0*x"):
    return {
        "CSVT": {
            "SFb": {
                "formula": sfb,
                "pt_min": 20.0,
                "pt_max": 400.0,
                "bins": [20, 50, 100],
                "errors": [error, 2 * error, 3 * error],
                "c_error_scale": 2.0,
            },
            "SFl": {
                "mean": "1.0+0.001*x",
                "min": sfl_min,
                "max": "1.1+0.001*x",
                "pt_min": 20.0,
                "pt_max": 400.0,
            },
            "eff": {
                "Muon": {
                    "b": {"bins": [20, 50, 100], "values": [0.5, 0.6, 0.7]},
                    "c": {"bins": [20, 50, 100], "values": [0.1, 0.15, 0.2]},
                    "l": {"bins": [20, 50, 100], "values": [0.01, 0.02, 0.03]},
                }
            },
        }
    }


@pytest.mark.parametrize(
    "pt,expected",
    [(0.0, 0), (19.9, 0), (20.0, 0), (49.99, 0), (50.0, 1), (99.0, 1), (100.0, 2), (1e6, 2)],
)
def test_find_bin(pt, expected):
    assert find_bin([20, 50, 100], pt) == expected


def test_find_bin_array():
    np.testing.assert_array_equal(
        find_bin([20, 50, 100], np.array([-5.0, 25.0, 75.0, 150.0])), [0, 0, 1, 2]
    )


@pytest.mark.parametrize(
    "bins,values",
    [([], []), ([20, 50], [0.1]), ([20, 20, 50], [0.1, 0.2, 0.3]), ([50, 20], [0.1, 0.2])],
)
def test_binned_table_invalid(bins, values):
    with pytest.raises(ValueError):
        binned_table(bins, values, "test")


def test_binned_table_read_only():
    bins, values = binned_table([20, 50], [0.1, 0.2], "test")
    with pytest.raises(ValueError):
        values[0] = 1.0


def test_curve_clamps_to_domain():
    curve = Curve("test", "2*x", 20.0, 100.0)
    assert curve(50.0) == pytest.approx(100.0)
    assert curve(5.0) == pytest.approx(40.0)
    assert curve(500.0) == pytest.approx(200.0)
    np.testing.assert_allclose(curve(np.array([5.0, 50.0, 500.0])), [40.0, 100.0, 200.0])


def test_curve_empty_range():
    with pytest.raises(ValueError):
        Curve("test", "x", 100.0, 20.0)


@pytest.mark.parametrize("btagtype", list(BtagType))
@pytest.mark.parametrize("cls", [BtagScale, CtagScale, LtagScale])
def test_scale_clamping(btagtype, cls):
    sf = cls(btagtype)
    for method in [sf.value, sf.value_plus, sf.value_minus]:
        assert method(0.0) == pytest.approx(method(20.0))
        assert method(5000.0) == pytest.approx(method(800.0))


@pytest.mark.parametrize("btagtype", list(BtagType))
@pytest.mark.parametrize("cls", [BtagScale, CtagScale])
def test_scale_ordering(btagtype, cls):
    sf = cls(btagtype)
    assert np.all(sf.value_minus(pts) <= sf.value(pts))
    assert np.all(sf.value(pts) <= sf.value_plus(pts))
    assert np.all(sf.value_minus(pts) >= 0)


@pytest.mark.parametrize("btagtype", ["CSVL", "CSVM", "CSVT"])
def test_ctag_inflated_error(btagtype):
    b, c = BtagScale(btagtype), CtagScale(btagtype)
    np.testing.assert_allclose(c.value(pts), b.value(pts))
    np.testing.assert_allclose(c.error(pts), 2 * b.error(pts))
    np.testing.assert_allclose(c.value_plus(pts) - c.value(pts), 2 * b.error(pts))


def test_btag_scale_error_bins():
    sf = BtagScale("CSVT", config=small_config())
    assert sf.value(60.0) == pytest.approx(0.95)
    assert sf.value_plus(60.0) == pytest.approx(1.05)
    assert sf.value_minus(60.0) == pytest.approx(0.85)
    assert sf.value_plus(10.0) == pytest.approx(1.0)
    assert sf.value_plus(1000.0) == pytest.approx(1.1)


def test_scale_minus_floored_at_zero():
    sf = BtagScale("CSVT", config=small_config(sfb="0.1+0*x", error=0.5))
    assert sf.value_minus(30.0) == 0.0
    assert sf.value_plus(30.0) == pytest.approx(0.6)
    light = LtagScale("CSVT", config=small_config(sfl_min="-0.5+0*x"))
    assert light.value_minus(30.0) == 0.0


def test_ltag_independent_curves():
    sf = LtagScale("CSVT", config=small_config())
    assert sf.value(100.0) == pytest.approx(1.1)
    assert sf.value_plus(100.0) == pytest.approx(1.2)
    assert sf.value_minus(100.0) == pytest.approx(0.9)
    assert sf.value(1000.0) == pytest.approx(1.4)


@pytest.mark.parametrize("btagtype", list(BtagType))
@pytest.mark.parametrize("lepton_selection", list(LeptonSelection))
@pytest.mark.parametrize("cls", [BtagEfficiency, CtagEfficiency, LtagEfficiency])
def test_efficiency_has_no_variation(btagtype, lepton_selection, cls):
    eff = cls(btagtype, lepton_selection)
    np.testing.assert_array_equal(eff.value(pts), eff.value_plus(pts))
    np.testing.assert_array_equal(eff.value(pts), eff.value_minus(pts))
    assert np.all((eff.value(pts) >= 0) & (eff.value(pts) <= 1))


@pytest.mark.parametrize(
    "cls,flav", [(BtagEfficiency, "b"), (CtagEfficiency, "c"), (LtagEfficiency, "l")]
)
def test_efficiency_table_lookup(cls, flav):
    table = btag_config["CSVM"]["eff"]["Electron"][flav]
    eff = cls(BtagType.CSVM, LeptonSelection.Electron)
    assert eff.value(table["bins"][3]) == table["values"][3]
    assert eff.value(0.0) == table["values"][0]
    assert eff.value(1e5) == table["values"][-1]


def test_scalar_and_array_outputs():
    sf = BtagScale("CSVM")
    assert isinstance(sf.value(50.0), float)
    assert isinstance(sf.value_minus(50.0), float)
    assert isinstance(BtagEfficiency("CSVM", "Muon").value(50.0), float)
    assert sf.value(np.array([30.0, 60.0])).shape == (2,)


def test_unknown_configuration():
    with pytest.raises(ValueError):
        BtagScale("JPT")
    with pytest.raises(ValueError):
        BtagEfficiency("CSVT", "Tau")
    with pytest.raises(ValueError):
        BtagEfficiency("CSVT", "Electron", config=small_config())
    with pytest.raises(ValueError):
        BtagScale("CSVM", config=small_config())
