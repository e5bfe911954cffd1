from abc import ABC, abstractmethod

import numpy as np
import correctionlib.schemav2 as cs

from BTVReweighting.helpers.definitions import BtagType, LeptonSelection, as_member
from BTVReweighting.utils.BTV_parameters import btag_config


def _output(values, pt):
    # keep scalars scalar, arrays arrays
    if np.ndim(pt) == 0:
        return float(values)
    return values


def _frozen(values):
    arr = np.array(values, dtype=np.float64)
    arr.setflags(write=False)
    return arr


def find_bin(bins, pt):
    """
    Find the bin of a binned table for the given transverse momentum.

    Parameters:
    bins (array-like): Strictly increasing lower bin edges.
    pt (float or array-like): Jet transverse momentum.

    Returns:
    int or np.ndarray: Index of the highest edge not exceeding pt, clamped to [0, len(bins) - 1].
    """
    idx = np.searchsorted(bins, np.asarray(pt, dtype=np.float64), side="right") - 1
    idx = np.clip(idx, 0, len(bins) - 1)
    if np.ndim(idx) == 0:
        return int(idx)
    return idx


def binned_table(bins, values, name, lower=None, upper=None):
    """
    Validate a binned table and return it as read-only arrays.

    Parameters:
    bins (list): Lower bin edges, strictly increasing.
    values (list): One value per bin.
    name (str): Name of the table, used in error messages.
    lower (float, optional): Minimum allowed value.
    upper (float, optional): Maximum allowed value.

    Returns:
    tuple: (bins, values) as numpy arrays.

    Raises:
    ValueError: If the table is empty, the lengths differ, the edges are not increasing or a value is out of range.
    """
    bins, values = _frozen(bins), _frozen(values)
    if bins.ndim != 1 or bins.size == 0:
        raise ValueError(f"{name}: need at least one bin")
    if bins.shape != values.shape:
        raise ValueError(
            f"{name}: {bins.size} bin edges but {values.size} values"
        )
    if np.any(np.diff(bins) <= 0):
        raise ValueError(f"{name}: bin edges must be strictly increasing, got {bins}")
    if lower is not None and np.any(values < lower):
        raise ValueError(f"{name}: values below {lower}")
    if upper is not None and np.any(values > upper):
        raise ValueError(f"{name}: values above {upper}")
    return bins, values


class Curve(object):
    def __init__(self, name, expression, pt_min, pt_max):
        """
        A fitted function of the jet pt, evaluated with correctionlib.
            name: name of the correction
            expression: TFormula expression in x
            pt_min, pt_max: validity range of the fit, pt outside is clamped
        """
        if not pt_min < pt_max:
            raise ValueError(f"{name}: empty pt range [{pt_min}, {pt_max}]")
        self.pt_min = float(pt_min)
        self.pt_max = float(pt_max)
        self.expression = expression
        self._evaluator = cs.Correction(
            name=name,
            version=1,
            inputs=[
                cs.Variable(name="pt", type="real", description="Jet pt in GeV.")
            ],
            output=cs.Variable(name="sf", type="real", description="Scale factor."),
            data=cs.Formula(
                nodetype="formula",
                variables=["pt"],
                parser="TFormula",
                expression=expression,
            ),
        ).to_evaluator()

    def __call__(self, pt):
        x = np.clip(np.asarray(pt, dtype=np.float64), self.pt_min, self.pt_max)
        if x.ndim == 0:
            return float(self._evaluator.evaluate(float(x)))
        return np.asarray(self._evaluator.evaluate(x), dtype=np.float64)


class BtagFunction(ABC):
    """Correction as a function of jet pt with +-1 sigma variations."""

    def __init__(self, btagtype, config=None):
        self.btagtype = as_member(BtagType, btagtype, "b-tagging type")
        config = btag_config if config is None else config
        if self.btagtype.value not in config:
            raise ValueError(
                f"No calibration for {self.btagtype.value}, available: {list(config)}"
            )
        self._config = config[self.btagtype.value]

    def _section(self, key):
        if key not in self._config:
            raise ValueError(f"{key} missing in calibration of {self.btagtype.value}")
        return self._config[key]

    @abstractmethod
    def value(self, pt):
        pass

    @abstractmethod
    def value_plus(self, pt):
        pass

    @abstractmethod
    def value_minus(self, pt):
        pass


class BtagScale(BtagFunction):
    """Data/MC scale factor of b jets: fitted curve with binned uncertainty."""

    def __init__(self, btagtype, config=None):
        super().__init__(btagtype, config)
        sfb = self._section("SFb")
        self._scale = Curve(
            f"SFb_{self.btagtype.value}", sfb["formula"], sfb["pt_min"], sfb["pt_max"]
        )
        self._bins, self._errors = binned_table(
            sfb["bins"], sfb["errors"], f"SFb errors {self.btagtype.value}", lower=0
        )

    def value(self, pt):
        return self._scale(pt)

    def error(self, pt):
        return _output(self._errors[find_bin(self._bins, pt)], pt)

    def value_plus(self, pt):
        return self.value(pt) + self.error(pt)

    def value_minus(self, pt):
        return _output(np.maximum(self.value(pt) - self.error(pt), 0.0), pt)


class CtagScale(BtagScale):
    """c jets share the b curve with an inflated uncertainty."""

    def __init__(self, btagtype, config=None):
        super().__init__(btagtype, config)
        self._error_scale = float(self._section("SFb").get("c_error_scale", 2.0))
        if self._error_scale < 0:
            raise ValueError("c_error_scale must be non-negative")

    def error(self, pt):
        return self._error_scale * super().error(pt)


class LtagScale(BtagFunction):
    """Mistag scale factor of light jets, separate fits for mean, max and min."""

    def __init__(self, btagtype, config=None):
        super().__init__(btagtype, config)
        sfl = self._section("SFl")
        name = f"SFl_{self.btagtype.value}"
        self._scale = Curve(name, sfl["mean"], sfl["pt_min"], sfl["pt_max"])
        self._scale_plus = Curve(
            f"{name}_up", sfl["max"], sfl["pt_min"], sfl["pt_max"]
        )
        self._scale_minus = Curve(
            f"{name}_down", sfl["min"], sfl["pt_min"], sfl["pt_max"]
        )

    def value(self, pt):
        return self._scale(pt)

    def value_plus(self, pt):
        return self._scale_plus(pt)

    def value_minus(self, pt):
        return _output(np.maximum(self._scale_minus(pt), 0.0), pt)


class BtagEfficiency(BtagFunction):
    """MC tagging efficiency of b jets, read from a binned table."""

    flavour = "b"

    def __init__(self, btagtype, lepton_selection, config=None):
        super().__init__(btagtype, config)
        self.lepton_selection = as_member(
            LeptonSelection, lepton_selection, "lepton selection"
        )
        effs = self._section("eff")
        try:
            table = effs[self.lepton_selection.value][self.flavour]
        except KeyError:
            raise ValueError(
                f"No {self.flavour} efficiency for {self.btagtype.value} "
                f"in the {self.lepton_selection.value} selection"
            ) from None
        self._bins, self._values = binned_table(
            table["bins"],
            table["values"],
            f"{self.flavour} efficiency {self.btagtype.value} {self.lepton_selection.value}",
            lower=0,
            upper=1,
        )

    def value(self, pt):
        return _output(self._values[find_bin(self._bins, pt)], pt)

    def value_plus(self, pt):
        return self.value(pt)

    def value_minus(self, pt):
        return self.value(pt)


class CtagEfficiency(BtagEfficiency):
    flavour = "c"


class LtagEfficiency(BtagEfficiency):
    flavour = "l"
