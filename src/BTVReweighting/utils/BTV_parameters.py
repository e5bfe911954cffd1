## b-tagging calibration payloads for the CSV tagger (8 TeV, |eta| < 2.4)
## SFb / SFl: BTV POG fixed working point fits, ttbar + muon-jet combination
## eff: MC tagging efficiencies measured in the l+jets selections
_pt_bins = [20, 30, 40, 50, 60, 70, 80, 100, 120, 160, 210, 260, 320, 400, 500, 600]

btag_config = {
    "CSVL": {
        "SFb": {
            "formula": "0.997942*((1.+(0.00923753*x))/(1.+(0.0096119*x)))",
            "pt_min": 20.0,
            "pt_max": 800.0,
            "bins": _pt_bins,
            "errors": [
                0.0484285,
                0.0126178,
                0.0120027,
                0.0141137,
                0.0145441,
                0.0131145,
                0.0168479,
                0.0160836,
                0.0126209,
                0.0136017,
                0.019182,
                0.0198805,
                0.0386531,
                0.0392831,
                0.0481008,
                0.0474291,
            ],
            "c_error_scale": 2.0,
        },
        "SFl": {
            "mean": "((1.0344+(0.000962994*x))+(-3.65392e-06*(x*x)))+(3.23525e-09*(x*(x*x)))",
            "min": "((0.956023+(0.000825106*x))+(-3.18828e-06*(x*x)))+(2.81787e-09*(x*(x*x)))",
            "max": "((1.11272+(0.00110104*x))+(-4.11956e-06*(x*x)))+(3.64219e-09*(x*(x*x)))",
            "pt_min": 20.0,
            "pt_max": 800.0,
        },
        "eff": {
            "Muon": {
                "b": {
                    "bins": _pt_bins,
                    "values": [0.781, 0.812, 0.829, 0.838, 0.845, 0.849, 0.852, 0.855, 0.857, 0.858, 0.857, 0.853, 0.848, 0.841, 0.832, 0.822],
                },
                "c": {
                    "bins": _pt_bins,
                    "values": [0.382, 0.398, 0.409, 0.417, 0.423, 0.427, 0.431, 0.436, 0.440, 0.445, 0.449, 0.452, 0.454, 0.456, 0.457, 0.458],
                },
                "l": {
                    "bins": _pt_bins,
                    "values": [0.092, 0.095, 0.098, 0.101, 0.104, 0.107, 0.110, 0.114, 0.119, 0.126, 0.134, 0.141, 0.148, 0.154, 0.159, 0.163],
                },
            },
            "Electron": {
                "b": {
                    "bins": _pt_bins,
                    "values": [0.776, 0.808, 0.826, 0.836, 0.843, 0.848, 0.851, 0.854, 0.856, 0.857, 0.856, 0.852, 0.846, 0.839, 0.830, 0.820],
                },
                "c": {
                    "bins": _pt_bins,
                    "values": [0.379, 0.395, 0.407, 0.415, 0.421, 0.426, 0.430, 0.435, 0.439, 0.444, 0.448, 0.451, 0.453, 0.455, 0.456, 0.457],
                },
                "l": {
                    "bins": _pt_bins,
                    "values": [0.094, 0.097, 0.100, 0.103, 0.106, 0.109, 0.112, 0.116, 0.121, 0.128, 0.136, 0.143, 0.150, 0.156, 0.161, 0.165],
                },
            },
        },
    },
    "CSVM": {
        "SFb": {
            "formula": "(0.938887+(0.00017124*x))+(-2.76366e-07*(x*x))",
            "pt_min": 20.0,
            "pt_max": 800.0,
            "bins": _pt_bins,
            "errors": [
                0.0415694,
                0.023429,
                0.0261074,
                0.0239251,
                0.0232416,
                0.0197478,
                0.0218397,
                0.0233541,
                0.0216235,
                0.0266014,
                0.0243054,
                0.0228017,
                0.0273921,
                0.0282227,
                0.0386932,
                0.0424097,
            ],
            "c_error_scale": 2.0,
        },
        "SFl": {
            "mean": "((1.04318+(0.000848162*x))+(-2.5795e-06*(x*x)))+(1.64156e-09*(x*(x*x)))",
            "min": "((0.962627+(0.000448344*x))+(-1.25579e-06*(x*x)))+(4.82283e-10*(x*(x*x)))",
            "max": "((1.12368+(0.00124806*x))+(-3.9032e-06*(x*x)))+(2.80083e-09*(x*(x*x)))",
            "pt_min": 20.0,
            "pt_max": 800.0,
        },
        "eff": {
            "Muon": {
                "b": {
                    "bins": _pt_bins,
                    "values": [0.598, 0.651, 0.681, 0.698, 0.709, 0.716, 0.720, 0.723, 0.724, 0.721, 0.713, 0.702, 0.688, 0.671, 0.652, 0.631],
                },
                "c": {
                    "bins": _pt_bins,
                    "values": [0.148, 0.162, 0.171, 0.177, 0.181, 0.184, 0.186, 0.188, 0.190, 0.191, 0.191, 0.190, 0.188, 0.185, 0.182, 0.178],
                },
                "l": {
                    "bins": _pt_bins,
                    "values": [0.0102, 0.0108, 0.0113, 0.0118, 0.0123, 0.0128, 0.0133, 0.0141, 0.0150, 0.0163, 0.0180, 0.0196, 0.0212, 0.0228, 0.0243, 0.0256],
                },
            },
            "Electron": {
                "b": {
                    "bins": _pt_bins,
                    "values": [0.592, 0.646, 0.677, 0.695, 0.707, 0.714, 0.718, 0.721, 0.722, 0.719, 0.711, 0.700, 0.686, 0.669, 0.650, 0.629],
                },
                "c": {
                    "bins": _pt_bins,
                    "values": [0.146, 0.160, 0.169, 0.175, 0.180, 0.183, 0.185, 0.187, 0.189, 0.190, 0.190, 0.189, 0.187, 0.184, 0.181, 0.177],
                },
                "l": {
                    "bins": _pt_bins,
                    "values": [0.0105, 0.0111, 0.0116, 0.0121, 0.0126, 0.0131, 0.0136, 0.0144, 0.0153, 0.0166, 0.0183, 0.0199, 0.0215, 0.0231, 0.0246, 0.0259],
                },
            },
        },
    },
    "CSVT": {
        "SFb": {
            "formula": "(0.927563+(1.55479e-05*x))+(-1.90666e-07*(x*x))",
            "pt_min": 20.0,
            "pt_max": 800.0,
            "bins": _pt_bins,
            "errors": [
                0.0515703,
                0.0264008,
                0.0272757,
                0.0275565,
                0.0248745,
                0.0218456,
                0.0253845,
                0.0239588,
                0.0271791,
                0.0273912,
                0.0379822,
                0.0411624,
                0.0786307,
                0.0866832,
                0.0942053,
                0.102403,
            ],
            "c_error_scale": 2.0,
        },
        "SFl": {
            "mean": "((0.948463+(0.00288102*x))+(-7.98091e-06*(x*x)))+(5.50157e-09*(x*(x*x)))",
            "min": "((0.899715+(0.00102278*x))+(-2.46335e-06*(x*x)))+(9.71143e-10*(x*(x*x)))",
            "max": "((0.997205+(0.00473652*x))+(-1.34985e-05*(x*x)))+(1.0032e-08*(x*(x*x)))",
            "pt_min": 20.0,
            "pt_max": 800.0,
        },
        "eff": {
            "Muon": {
                "b": {
                    "bins": _pt_bins,
                    "values": [0.421, 0.487, 0.527, 0.552, 0.569, 0.580, 0.588, 0.594, 0.597, 0.593, 0.581, 0.563, 0.541, 0.514, 0.484, 0.452],
                },
                "c": {
                    "bins": _pt_bins,
                    "values": [0.0412, 0.0468, 0.0503, 0.0527, 0.0544, 0.0556, 0.0565, 0.0574, 0.0580, 0.0584, 0.0582, 0.0575, 0.0563, 0.0547, 0.0528, 0.0507],
                },
                "l": {
                    "bins": _pt_bins,
                    "values": [0.0014, 0.0015, 0.0016, 0.0017, 0.0018, 0.0019, 0.0020, 0.0022, 0.0024, 0.0027, 0.0031, 0.0035, 0.0041, 0.0048, 0.0057, 0.0066],
                },
            },
            "Electron": {
                "b": {
                    "bins": _pt_bins,
                    "values": [0.416, 0.482, 0.523, 0.549, 0.566, 0.578, 0.586, 0.592, 0.595, 0.591, 0.579, 0.561, 0.539, 0.512, 0.482, 0.450],
                },
                "c": {
                    "bins": _pt_bins,
                    "values": [0.0408, 0.0464, 0.0500, 0.0524, 0.0541, 0.0553, 0.0562, 0.0571, 0.0577, 0.0581, 0.0579, 0.0572, 0.0560, 0.0544, 0.0525, 0.0504],
                },
                "l": {
                    "bins": _pt_bins,
                    "values": [0.0015, 0.0016, 0.0017, 0.0018, 0.0019, 0.0020, 0.0021, 0.0023, 0.0025, 0.0028, 0.0032, 0.0036, 0.0042, 0.0049, 0.0058, 0.0067],
                },
            },
        },
    },
}
