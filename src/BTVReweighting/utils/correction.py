import copy
import warnings

import numpy as np
import awkward as ak

from BTVReweighting.helpers.definitions import (
    BtagType,
    Flavour,
    LeptonSelection,
    SystShift,
    as_member,
    shift_schema,
)
from BTVReweighting.helpers.btag_functions import (
    BtagScale,
    CtagScale,
    LtagScale,
    BtagEfficiency,
    CtagEfficiency,
    LtagEfficiency,
)


def _event_ratio(p_data, p_mc):
    # events whose MC probability vanishes get a neutral weight
    degenerate = p_mc <= 0
    if np.any(degenerate):
        warnings.warn(
            f"{int(np.sum(degenerate))} event(s) with zero MC tagging probability, "
            "b-tagging weight set to 1",
            RuntimeWarning,
            stacklevel=3,
        )
    return np.where(degenerate, 1.0, p_data / np.where(degenerate, 1.0, p_mc))


class BTaggingScaleFactors(object):
    def __init__(
        self,
        btagtype,
        lepton_selection,
        sys_bjets=SystShift.Default,
        sys_ljets=SystShift.Default,
        config=None,
    ):
        """
        Data/MC b-tagging event weight for fixed working points (method 1a):
        https://twiki.cern.ch/twiki/bin/view/CMS/BTagSFMethods

        Parameters:
        btagtype (BtagType or str): Tagging algorithm and working point, e.g. "CSVT".
        lepton_selection (LeptonSelection or str): Selection the MC efficiencies were measured in.
        sys_bjets (SystShift or str, optional): Shift of the b and c jet scale factors. Default is nominal.
        sys_ljets (SystShift or str, optional): Shift of the light jet scale factor. Default is nominal.
        config (dict, optional): Calibration payloads shaped like BTV_parameters.btag_config.

        Raises:
        ValueError: If any option is unknown or the calibration for it is missing.
        """
        self.btagtype = as_member(BtagType, btagtype, "b-tagging type")
        self.lepton_selection = as_member(
            LeptonSelection, lepton_selection, "lepton selection"
        )
        self._set_shifts(sys_bjets, sys_ljets)

        # (scale factor, MC efficiency) per flavour
        self._functions = {
            Flavour.b: (
                BtagScale(self.btagtype, config),
                BtagEfficiency(self.btagtype, self.lepton_selection, config),
            ),
            Flavour.c: (
                CtagScale(self.btagtype, config),
                CtagEfficiency(self.btagtype, self.lepton_selection, config),
            ),
            Flavour.light: (
                LtagScale(self.btagtype, config),
                LtagEfficiency(self.btagtype, self.lepton_selection, config),
            ),
        }

    def _set_shifts(self, sys_bjets, sys_ljets):
        self.sys_bjets = as_member(SystShift, sys_bjets, "b/c jet shift")
        self.sys_ljets = as_member(SystShift, sys_ljets, "light jet shift")
        self._shifts = {
            Flavour.b: self.sys_bjets,
            Flavour.c: self.sys_bjets,
            Flavour.light: self.sys_ljets,
        }

    def shifted(self, sys_bjets=SystShift.Default, sys_ljets=SystShift.Default):
        """
        Return a combiner with other systematic shifts.

        The tagging functions are immutable and shared with this instance, only
        the shift selection differs.
        """
        other = copy.copy(self)
        other._set_shifts(sys_bjets, sys_ljets)
        return other

    def functions(self, flavour):
        return self._functions[Flavour.of(flavour)]

    def scale_factor(self, flavour, pt):
        """Scale factor of the flavour class, shifted along the axis it belongs to."""
        flavour = Flavour.of(flavour)
        sf = self._functions[flavour][0]
        shift = self._shifts[flavour]
        if shift == SystShift.Up:
            return sf.value_plus(pt)
        if shift == SystShift.Down:
            return sf.value_minus(pt)
        return sf.value(pt)

    def efficiency(self, flavour, pt):
        # efficiencies are never shifted
        return self._functions[Flavour.of(flavour)][1].value(pt)

    def match_flav(self, pt, flav):
        """
        Evaluate scale factor and efficiency of each jet for its flavour.

        Parameters:
        pt (np.ndarray): Flat array of jet pt.
        flav (np.ndarray): Flat array of hadron flavour labels.

        Returns:
        tuple: (sf, eff) as flat numpy arrays.
        """
        flav = Flavour.classify(flav)
        sf = np.ones_like(pt)
        eff = np.zeros_like(pt)
        for flavour in Flavour:
            is_flav = flav == flavour
            if not np.any(is_flav):
                continue
            sf[is_flav] = self.scale_factor(flavour, pt[is_flav])
            eff[is_flav] = self.efficiency(flavour, pt[is_flav])
        return sf, eff

    def jet_probabilities(self, pt, flav, tagged):
        """
        Per-jet probability of the observed tag decision in data and in MC.

        Returns:
        tuple: (p_data, p_mc) as flat numpy arrays.
        """
        sf, eff = self.match_flav(pt, flav)
        sf_eff = sf * eff
        p_mc = np.where(tagged, eff, 1.0 - eff)
        p_data = np.where(
            tagged, np.minimum(sf_eff, 1.0), np.maximum(1.0 - sf_eff, 0.0)
        )
        return p_data, p_mc

    def _columns(self, jets, tagged, flavour):
        jets = jets if isinstance(jets, ak.Array) else ak.Array(jets)
        for field in ["pt", flavour] + ([tagged] if isinstance(tagged, str) else []):
            if field not in jets.fields:
                raise ValueError(f"Jet collection has no field {field!r}: {jets.fields}")
        is_tagged = jets[tagged] if isinstance(tagged, str) else ak.Array(tagged)
        pt, flav = jets.pt, jets[flavour]
        # missing jets (e.g. from ak.pad_none) do not enter the weight
        present = ~(
            ak.is_none(pt, axis=-1)
            | ak.is_none(flav, axis=-1)
            | ak.is_none(is_tagged, axis=-1)
        )
        return (
            ak.fill_none(pt[present], 0.0),
            ak.fill_none(flav[present], 0),
            ak.fill_none(is_tagged[present], False),
        )

    def get_weight(self, jets, tagged="btagged", flavour="hadronFlavour"):
        """
        Return the b-tagging weight of a single event.

        Parameters:
        jets (ak.Array or list): Jets of the event with pt, flavour and tag decision.
        tagged (str or array-like, optional): Name of the boolean tag field, or the tag decisions.
        flavour (str, optional): Name of the hadron flavour field.

        Returns:
        float: P(data) / P(MC) of the event, 1 for an event without jets.
        """
        if len(jets) == 0:
            return 1.0
        pt, flav, is_tagged = self._columns(jets, tagged, flavour)
        if pt.ndim != 1:
            raise ValueError("get_weight takes the jets of one event, use get_weights")
        p_data, p_mc = self.jet_probabilities(
            ak.to_numpy(pt).astype(np.float64),
            ak.to_numpy(flav),
            ak.to_numpy(is_tagged).astype(bool),
        )
        return float(
            _event_ratio(np.array([np.prod(p_data)]), np.array([np.prod(p_mc)]))[0]
        )

    def get_weights(self, jets, tagged="btagged", flavour="hadronFlavour"):
        """
        Return the b-tagging weight of every event of a jagged jet collection.

        Parameters:
        jets (ak.Array): events x jets array with pt, flavour and tag decision.
        tagged (str or ak.Array, optional): Name of the boolean tag field, or the jagged tag decisions.
        flavour (str, optional): Name of the hadron flavour field.

        Returns:
        np.ndarray: One weight per event.
        """
        jets = jets if isinstance(jets, ak.Array) else ak.Array(jets)
        # untyped all-empty input has no fields to read
        if len(jets) == 0 or ak.sum(ak.num(jets, axis=1)) == 0:
            return np.ones(len(jets))
        pt, flav, is_tagged = self._columns(jets, tagged, flavour)
        counts = ak.num(pt)
        p_data, p_mc = self.jet_probabilities(
            ak.to_numpy(ak.flatten(pt)).astype(np.float64),
            ak.to_numpy(ak.flatten(flav)),
            ak.to_numpy(ak.flatten(is_tagged)).astype(bool),
        )
        return _event_ratio(
            ak.to_numpy(ak.prod(ak.unflatten(p_data, counts), axis=1)),
            ak.to_numpy(ak.prod(ak.unflatten(p_mc, counts), axis=1)),
        )


def variation_weights(
    jets,
    btagtype,
    lepton_selection,
    tagged="btagged",
    flavour="hadronFlavour",
    config=None,
):
    """
    Compute the event weights for the central value and every named variation.

    Returns:
    dict: Variation name (see definitions.shift_schema) to per-event weights.
    """
    nominal = BTaggingScaleFactors(btagtype, lepton_selection, config=config)
    return {
        name: nominal.shifted(sys_bjets, sys_ljets).get_weights(jets, tagged, flavour)
        for name, (sys_bjets, sys_ljets) in shift_schema.items()
    }


def btagSFs(
    jets,
    btagtype,
    lepton_selection,
    weights,
    tagged="btagged",
    syst=False,
    flavour="hadronFlavour",
    config=None,
):
    """
    Apply the fixed working point b-tagging weight to a coffea Weights instance.

    Parameters:
    jets (ak.Array): events x jets array with pt, flavour and tag decision.
    btagtype (BtagType or str): Tagging algorithm and working point.
    lepton_selection (LeptonSelection or str): Selection the MC efficiencies were measured in.
    weights (coffea.analysis_tools.Weights): Weights to add the b-tagging weight to.
    tagged (str or ak.Array, optional): Name of the boolean tag field, or the jagged tag decisions.
    syst (bool, optional): Also add the bc and light up/down variations. Default is False.

    Returns:
    coffea.analysis_tools.Weights: The weights instance, modified in place.
    """
    name = f"btagSF_{as_member(BtagType, btagtype, 'b-tagging type').value}"
    if not syst:
        weights.add(
            name,
            BTaggingScaleFactors(
                btagtype, lepton_selection, config=config
            ).get_weights(jets, tagged, flavour),
        )
        return weights
    sfs = variation_weights(jets, btagtype, lepton_selection, tagged, flavour, config)
    weights.add_multivariation(
        name,
        sfs["central"],
        ["bc", "light"],
        [sfs["bc_up"], sfs["l_up"]],
        [sfs["bc_down"], sfs["l_down"]],
    )
    return weights
