"""Physical and empirical constants for open-pond simulation.

All values use SI units unless the comment states otherwise. Unit
conversion factors that the formulas rely on are named here so that no
x1000 or x3600 disappears silently at the point of use.
"""

import math
from typing import Final

# =============================================================================
# Radiation
# =============================================================================

#: Stefan-Boltzmann constant (W/(m²·K⁴))
STEFAN_BOLTZMANN: Final[float] = 5.67e-8

#: Emissivity of a water surface in the thermal infrared (dimensionless)
EMISSIVITY_WATER: Final[float] = 0.97

# =============================================================================
# Water Properties
# =============================================================================

#: Density of water (kg/m³)
DENSITY_WATER: Final[float] = 1000.0

#: Specific heat of liquid water (J/(kg·K))
C_P_WATER: Final[float] = 4186.0

#: Latent heat of vaporization (MJ/kg)
LATENT_HEAT_VAPORIZATION_MJ: Final[float] = 2.45

# =============================================================================
# PAR Conversion
# =============================================================================

#: PAR fraction of the total solar spectrum (dimensionless)
PAR_FRACTION: Final[float] = 0.43

#: Photon flux per joule of sunlight in the PAR band (µmol/J)
PAR_CONVERSION_FACTOR: Final[float] = 4.57

#: Shortcut from shortwave W/m² to PAR µmol/(m²·s) (≈ 1.965)
PAR_COMBINED: Final[float] = PAR_FRACTION * PAR_CONVERSION_FACTOR

# =============================================================================
# Optics
# =============================================================================

#: Refractive index of air
N_AIR: Final[float] = 1.0

#: Refractive index of water
N_WATER: Final[float] = 1.333

#: Transmission at near-normal incidence (empirical interface loss)
FRESNEL_NORMAL_TRANSMISSION: Final[float] = 0.98

#: Minimum usable PAR for growth (µmol/(m²·s))
MIN_USABLE_PAR: Final[float] = 1.0

#: Single equivalent incidence angle for hemispherical diffuse light (degrees)
DIFFUSE_EQUIVALENT_ANGLE: Final[float] = 60.0

#: Cap on the refracted path length as a multiple of the physical depth
MAX_PATH_LENGTH_FACTOR: Final[float] = 100.0

#: Below this optical thickness K·L the culture is treated as transparent
OPTICALLY_THIN_LIMIT: Final[float] = 0.001

# =============================================================================
# Heat Transfer
# =============================================================================

#: Heat of combustion of algal biomass (MJ/kg)
HEAT_OF_COMBUSTION_BIOMASS: Final[float] = 20.0

#: Bowen constant (Pa/°C)
BOWEN_CONSTANT: Final[float] = 61.3

#: Aerodynamic roughness length of open water (m)
ROUGHNESS_LENGTH_WATER: Final[float] = 0.001

#: Thermal conductivity of soil (W/(m·K))
THERMAL_CONDUCTIVITY_SOIL: Final[float] = 1.5

#: Effective soil depth for ground conduction (m)
GROUND_CONDUCTION_DEPTH: Final[float] = 0.5

#: Reference atmospheric pressure (Pa)
STANDARD_PRESSURE: Final[float] = 101325.0

#: McAdams free-plus-forced coefficients, W/(m²·K) and W·s/(m³·K)
MCADAMS_CALM: Final[float] = 3.0
MCADAMS_WIND: Final[float] = 4.2

#: Fixed wind speed assumed by the McAdams fallback (m/s)
MCADAMS_FALLBACK_WIND: Final[float] = 2.0

#: Vapour pressure deficit below which the Bowen ratio is undefined (kPa)
MIN_VAPOR_PRESSURE_DEFICIT: Final[float] = 0.001

#: Depth used when the surface area is non-positive (m)
FALLBACK_DEPTH: Final[float] = 0.25

# =============================================================================
# Evaporation (Penman-type)
# =============================================================================

#: Evaporative mass-transfer coefficient (MJ/(m²·day·kPa))
EVAPORATION_COEFFICIENT: Final[float] = 6.43

#: Calm-air coefficient of the wind function (dimensionless)
WIND_FUNCTION_CALM: Final[float] = 1.0

#: Wind enhancement coefficient of the wind function (s/m)
WIND_FUNCTION_SLOPE: Final[float] = 0.536

#: Log-profile ratio from 10 m to 2 m over open water (≈ 0.8253)
WIND_10M_TO_2M: Final[float] = math.log(2.0 / ROUGHNESS_LENGTH_WATER) / math.log(
    10.0 / ROUGHNESS_LENGTH_WATER
)

# =============================================================================
# Growth and Operations
# =============================================================================

#: Biomass concentration floor (g/L)
MIN_BIOMASS: Final[float] = 0.01

#: First hour of the nightly harvest window
HARVEST_START_HOUR: Final[int] = 20

#: Number of hours the nightly harvest is spread over
HARVEST_HOURS: Final[int] = 4

#: Fraction of harvested culture water recycled back to the pond
HARVEST_WATER_RECYCLE: Final[float] = 0.8

# =============================================================================
# Unit Conversions
# =============================================================================

HOURS_PER_DAY: Final[int] = 24
SECONDS_PER_HOUR: Final[float] = 3600.0
SQUARE_METERS_PER_HECTARE: Final[float] = 10000.0
LITERS_PER_CUBIC_METER: Final[float] = 1000.0
GRAMS_PER_KILOGRAM: Final[float] = 1000.0
JOULES_PER_MEGAJOULE: Final[float] = 1.0e6

#: MJ/(m²·day) per W/m² (86400 s / 1e6)
MJ_PER_DAY_PER_WATT: Final[float] = 0.0864

#: W/m² per MJ/(m²·h) (1e6 / 3600)
WATTS_PER_MJ_PER_HOUR: Final[float] = JOULES_PER_MEGAJOULE / SECONDS_PER_HOUR

#: g/L to g/m³
G_PER_L_TO_G_PER_M3: Final[float] = 1000.0


def celsius_to_kelvin(t_celsius: float) -> float:
    """Convert temperature from Celsius to Kelvin.

    Args:
        t_celsius: Temperature in degrees Celsius.

    Returns:
        Temperature in Kelvin.
    """
    return t_celsius + 273.15
