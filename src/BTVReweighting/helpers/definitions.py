from enum import Enum, IntEnum

import numpy as np


class BtagType(str, Enum):
    """Tagging algorithm and working point of the calibration."""

    CSVL = "CSVL"
    CSVM = "CSVM"
    CSVT = "CSVT"


class LeptonSelection(str, Enum):
    """Event selection the MC tagging efficiencies were measured in."""

    Muon = "Muon"
    Electron = "Electron"


class SystShift(str, Enum):
    Default = "Default"
    Up = "Up"
    Down = "Down"


class Flavour(IntEnum):
    """Hadron flavour classes used by the calibration (NanoAOD hadronFlavour)."""

    light = 0
    c = 4
    b = 5

    @classmethod
    def classify(cls, labels):
        """Map hadron flavour labels (scalar or array) onto 5, 4 or 0."""
        labels = np.asarray(labels)
        # anything that is not a b or c hadron is calibrated as light
        return np.where(
            np.isin(labels, [int(cls.b), int(cls.c)]), labels, int(cls.light)
        ).astype(np.int64)

    @classmethod
    def of(cls, label):
        return cls(int(cls.classify(label)))


# named variations -> (b/c shift, light shift)
shift_schema = {
    "central": (SystShift.Default, SystShift.Default),
    "bc_up": (SystShift.Up, SystShift.Default),
    "bc_down": (SystShift.Down, SystShift.Default),
    "l_up": (SystShift.Default, SystShift.Up),
    "l_down": (SystShift.Default, SystShift.Down),
}


def as_member(enum_cls, value, name):
    """
    Convert a member or its string value into an enumeration member.

    Parameters:
    enum_cls (Enum): The enumeration to convert to.
    value (Enum or str): The value to convert.
    name (str): Name of the option, used in the error message.

    Returns:
    Enum: The matching member of enum_cls.

    Raises:
    ValueError: If value is not a member of enum_cls.
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise ValueError(
            f"Unknown {name} {value!r}, allowed: {[m.value for m in enum_cls]}"
        ) from None
