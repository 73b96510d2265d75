"""Physical constants (CODATA 2018).

All values are in SI units unless the name says otherwise. Other modules
import these names instead of restating the literals.
"""

import math

# Speed of light in vacuum [m/s]
C = 2.99792458e8

# Speed of light [nm/s]
C_NM_S = 2.99792458e17

# Planck constant [J s]
H = 6.62607015e-34

# Reduced Planck constant [J s]
HBAR = 1.054571817e-34

# Boltzmann constant [J/K]
K_B = 1.380649e-23

# Elementary charge [C]
E = 1.602176634e-19

# Electron mass [kg]
M_E = 9.1093837015e-31

# Proton mass [kg]
M_P = 1.67262192369e-27

# Avogadro constant [1/mol]
N_A = 6.02214076e23

# Vacuum permittivity [F/m]
EPSILON_0 = 8.8541878128e-12

# Vacuum permeability [H/m]
MU_0 = 1.25663706212e-6

# Fine structure constant
ALPHA = 7.2973525693e-3

# Rydberg energy [eV]
RY = 13.605693122994

# Bohr radius [m]
BOHR_RADIUS = 5.29177210903e-11

# Bohr radius [nm]
BOHR_RADIUS_NM = 0.0529177210903

# Conversion factors
EV_TO_J = 1.602176634e-19
J_TO_EV = 6.241509074e18
NM_TO_M = 1e-9
M_TO_NM = 1e9
NM_TO_UM = 1e-3
UM_TO_NM = 1e3
ZERO_CELSIUS_K = 273.15
AMU_TO_KG = 1.66053906660e-27

# h*c [eV nm], photon energy from wavelength
HC_EV_NM = 1239.84193

# Thermal energy k_B T at 300 K
K_B_T_300K_EV = 0.02585
K_B_T_300K_J = 4.14e-21


def thermal_de_broglie_nm(mass_kg: float, temperature_k: float = 300.0) -> float:
    """Thermal de Broglie wavelength in nm for a particle of the given mass."""
    wavelength_m = H / math.sqrt(2.0 * math.pi * mass_kg * K_B * temperature_k)
    return wavelength_m * M_TO_NM


def plasma_wavelength_nm(omega_p_ev: float) -> float:
    """Wavelength in nm corresponding to a plasma energy in eV."""
    return HC_EV_NM / omega_p_ev


__all__ = [
    "C",
    "C_NM_S",
    "H",
    "HBAR",
    "K_B",
    "E",
    "M_E",
    "M_P",
    "N_A",
    "EPSILON_0",
    "MU_0",
    "ALPHA",
    "RY",
    "BOHR_RADIUS",
    "BOHR_RADIUS_NM",
    "EV_TO_J",
    "J_TO_EV",
    "NM_TO_M",
    "M_TO_NM",
    "NM_TO_UM",
    "UM_TO_NM",
    "ZERO_CELSIUS_K",
    "AMU_TO_KG",
    "HC_EV_NM",
    "K_B_T_300K_EV",
    "K_B_T_300K_J",
    "thermal_de_broglie_nm",
    "plasma_wavelength_nm",
]
