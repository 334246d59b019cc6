"""Open-pond simulation engine.

The engine advances the pond one hour per step:
1. Select the weather hour (cycling through the available days)
2. Compute light available to the culture
3. Evaluate light and temperature limitation
4. Combine into gross, net and effective growth rates
5. Update biomass
6. Apply the nightly harvest
7. Solve the heat balance and update temperature
8. Solve the water balance and update volume
9. Compute productivity
10. Record the timestep
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import TYPE_CHECKING

from pondsim.core.state import PondState, SimulationResult, TimestepRecord
from pondsim.physics.constants import (
    G_PER_L_TO_G_PER_M3,
    HARVEST_HOURS,
    HARVEST_START_HOUR,
    HARVEST_WATER_RECYCLE,
    HOURS_PER_DAY,
    JOULES_PER_MEGAJOULE,
    LATENT_HEAT_VAPORIZATION_MJ,
    LITERS_PER_CUBIC_METER,
    MIN_BIOMASS,
    SECONDS_PER_HOUR,
)
from pondsim.physics.heat_balance import compute_heat_balance
from pondsim.physics.kinetics import (
    get_light_response,
    get_temperature_response,
    multiplicative_growth_rate,
)
from pondsim.physics.optics import compute_par
from pondsim.simulation.results import summarize_timesteps
from pondsim.simulation.weather import weather_from_config

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pondsim.core.config import PondConfig, SimulationConfig
    from pondsim.core.state import PondGeometry, SimulationSummary
    from pondsim.physics.kinetics import LightResponse, TemperatureResponse
    from pondsim.simulation.weather import HourlyWeather, WeatherDay

logger = logging.getLogger(__name__)

#: Nutrient limitation factor (nutrients are not limiting)
NUTRIENT_FACTOR = 1.0

#: pH limitation factor (pH is not modelled)
PH_FACTOR = 1.0

#: Default local hour of the first simulated step
DEFAULT_START_HOUR = 7


class SimulationStatus(str, Enum):
    """Simulation status states."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class SimulationStats:
    """Statistics from a simulation run.

    Attributes:
        steps_completed: Number of hours simulated.
        wall_time: Actual elapsed time.
    """

    steps_completed: int = 0
    wall_time: timedelta = field(default_factory=timedelta)

    @property
    def avg_step_time(self) -> float:
        """Average wall time per step in milliseconds."""
        if self.steps_completed == 0:
            return 0.0
        return self.wall_time.total_seconds() * 1000 / self.steps_completed


@dataclass
class _HarvestStep:
    """Harvest outcome for one hour."""

    occurred: bool = False
    mass_kg: float = 0.0
    water_removed_l: float = 0.0
    water_returned_l: float = 0.0


class PondSimulationEngine:
    """Hourly open-pond simulation engine.

    Owns the pond state and the record of every simulated hour. Weather and
    configuration are read-only; each engine instance is independent.

    Examples:
        >>> engine = PondSimulationEngine(days, PondConfig(), total_days=2)
        >>> result = engine.run()
        >>> len(result.timesteps)
        48
    """

    def __init__(
        self,
        weather_days: Sequence[WeatherDay],
        config: PondConfig,
        total_days: int,
        *,
        start_hour: int = DEFAULT_START_HOUR,
        light_response: LightResponse | None = None,
        temperature_response: TemperatureResponse | None = None,
    ) -> None:
        """Initialize simulation engine.

        Args:
            weather_days: Weather days, cycled when shorter than the run.
            config: Pond configuration.
            total_days: Number of days to simulate.
            start_hour: Local hour of the first step (0-23).
            light_response: Light model, defaults to ``config.light_model``.
            temperature_response: Temperature model, defaults to
                ``config.temperature_model``.

        Raises:
            ValueError: If there is no weather, ``total_days`` is below 1 or
                ``start_hour`` is outside 0-23.
        """
        if not weather_days:
            msg = "At least one weather day is required"
            raise ValueError(msg)
        if total_days < 1:
            msg = f"total_days must be at least 1, got {total_days}"
            raise ValueError(msg)
        if not 0 <= start_hour <= 23:
            msg = f"start_hour must be between 0 and 23, got {start_hour}"
            raise ValueError(msg)

        self._weather_days = tuple(weather_days)
        self._config = config
        self._total_days = total_days
        self._start_hour = start_hour
        self._light_response = light_response or get_light_response(
            config.light_model
        )
        self._temperature_response = temperature_response or get_temperature_response(
            config.temperature_model
        )

        self._geometry = config.to_geometry()
        first = self._weather_days[0].hours[start_hour]
        initial_temperature = (
            first.temperature
            if config.initial_temperature is None
            else config.initial_temperature
        )
        self._state = PondState(
            biomass=config.initial_density,
            temperature=initial_temperature,
            volume=self._geometry.volume_m3,
        )

        self._timesteps: list[TimestepRecord] = []
        self._harvest_count = 0
        self._step_count = 0
        self._cycling_reported = False
        self._status = SimulationStatus.IDLE
        self._stats = SimulationStats()

    @property
    def state(self) -> PondState:
        """Current pond state."""
        return self._state

    @property
    def geometry(self) -> PondGeometry:
        """Pond geometry derived from the configuration."""
        return self._geometry

    @property
    def timesteps(self) -> list[TimestepRecord]:
        """Records of all completed steps."""
        return list(self._timesteps)

    @property
    def status(self) -> SimulationStatus:
        """Current simulation status."""
        return self._status

    @property
    def stats(self) -> SimulationStats:
        """Simulation statistics."""
        return self._stats

    @property
    def total_steps(self) -> int:
        """Number of hours in the run."""
        return self._total_days * HOURS_PER_DAY

    def _weather_for_step(self, step: int) -> tuple[WeatherDay, HourlyWeather]:
        """Select the weather day and hour for a step, cycling through the days."""
        day_offset = step // HOURS_PER_DAY
        if day_offset >= len(self._weather_days) and not self._cycling_reported:
            logger.warning(
                "Weather data covers %d days; reusing it from simulation day %d",
                len(self._weather_days),
                day_offset + 1,
            )
            self._cycling_reported = True
        day_index = day_offset % len(self._weather_days)
        hour = (step + self._start_hour) % HOURS_PER_DAY
        weather_day = self._weather_days[day_index]
        return weather_day, weather_day.hours[hour]

    def _harvest(self, hour: int, biomass: float) -> tuple[float, _HarvestStep]:
        """Apply the nightly harvest policy.

        The night's removal rate is fixed at the first window hour from the
        concentration at that moment and spread evenly over the window.

        Returns:
            Concentration after removal and the harvest outcome.
        """
        cfg = self._config
        outcome = _HarvestStep()
        if cfg.harvest_mode == "none":
            return biomass, outcome

        in_window = HARVEST_START_HOUR <= hour < HARVEST_START_HOUR + HARVEST_HOURS
        if hour == HARVEST_START_HOUR:
            if cfg.harvest_mode == "semi-continuous":
                excess = biomass - cfg.harvest_threshold
                rate = excess / HARVEST_HOURS if excess > 0 else 0.0
            elif biomass > cfg.harvest_threshold:
                rate = (biomass - cfg.harvest_target) / HARVEST_HOURS
            else:
                rate = 0.0
            self._state.harvest_rate = rate
            if rate > 0:
                self._harvest_count += 1
                logger.debug(
                    "Night %d: harvesting %.4f g/L per hour",
                    self._step_count // HOURS_PER_DAY + 1,
                    rate,
                )

        if not in_window or self._state.harvest_rate <= 0:
            return biomass, outcome

        remove = min(self._state.harvest_rate, biomass - MIN_BIOMASS)
        if remove <= 0:
            return biomass, outcome

        volume = self._state.volume
        outcome.occurred = True
        # g/L × m³ = kg
        outcome.mass_kg = remove * volume
        outcome.water_removed_l = (
            remove * volume * LITERS_PER_CUBIC_METER / biomass
        )
        outcome.water_returned_l = outcome.water_removed_l * HARVEST_WATER_RECYCLE
        return biomass - remove, outcome

    def step(self) -> bool:
        """Execute a single simulation hour.

        Returns:
            True if a step was executed, False if the run is complete.
        """
        if self._step_count >= self.total_steps:
            self._status = SimulationStatus.STOPPED
            return False

        cfg = self._config
        geom = self._geometry
        state = self._state
        step = self._step_count

        day = step // HOURS_PER_DAY + 1
        hour = (step + self._start_hour) % HOURS_PER_DAY
        weather_day, weather = self._weather_for_step(step)

        x = state.biomass
        t_pond = state.temperature
        v = state.volume

        # Light
        par = compute_par(weather, x, cfg.depth, cfg.epsilon, cfg.kb)

        # Growth
        f_light = self._light_response(par.par_avg_culture, cfg.i_opt)
        f_temp = self._temperature_response(t_pond, cfg.t_opt, cfg.alpha)
        mu_gross = multiplicative_growth_rate(
            cfg.mu_max, f_light, f_temp, NUTRIENT_FACTOR, PH_FACTOR
        )
        mu_net = mu_gross - cfg.death_rate
        mu_eff = mu_net * par.f_lighted

        x_new = max(MIN_BIOMASS, x + mu_eff / HOURS_PER_DAY * x)

        # Harvest
        x_new, harvest = self._harvest(hour, x_new)

        # Heat
        heat = compute_heat_balance(weather, t_pond, x, mu_eff, geom, volume=v)
        t_new = t_pond + heat.delta_t

        # Water
        area = geom.surface_area
        evap_l = (
            heat.q_evap
            * SECONDS_PER_HOUR
            * area
            / (LATENT_HEAT_VAPORIZATION_MJ * JOULES_PER_MEGAJOULE)
        )
        rainfall_l = weather.precipitation * area
        harvest_loss_l = harvest.water_removed_l - harvest.water_returned_l
        if v <= geom.volume_m3:
            makeup_l = max(0.0, evap_l + harvest_loss_l - rainfall_l)
        else:
            makeup_l = 0.0
        v_new = v + (rainfall_l + makeup_l - evap_l - harvest_loss_l) / LITERS_PER_CUBIC_METER

        # Water-only terms leave the biomass mass unchanged, so evaporation
        # above nominal volume concentrates the culture
        if v_new != v:
            x_new = max(MIN_BIOMASS, x_new * v / v_new)

        # Productivity
        productivity_vol = mu_eff * x if mu_eff > 0 else 0.0
        productivity_areal = productivity_vol * cfg.depth * G_PER_L_TO_G_PER_M3

        self._timesteps.append(
            TimestepRecord(
                weather_date=weather_day.date,
                day=day,
                hour=hour,
                biomass_concentration=x_new,
                pond_temperature=t_new,
                culture_volume=v_new,
                net_growth_rate=mu_eff,
                light_factor=f_light,
                temperature_factor=f_temp,
                nutrient_factor=NUTRIENT_FACTOR,
                lighted_depth_fraction=par.f_lighted,
                par_direct_surface=par.par_direct_surface,
                par_diffuse_surface=par.par_diffuse_surface,
                par_avg_culture=par.par_avg_culture,
                fresnel_transmission_direct=par.fresnel_direct,
                productivity_volumetric=productivity_vol,
                productivity_areal=productivity_areal,
                q_solar=heat.q_solar,
                q_longwave_in=heat.q_longwave_in,
                q_longwave_out=heat.q_longwave_out,
                q_evap=heat.q_evap,
                q_convection=heat.q_convection,
                q_conduction=heat.q_conduction,
                q_biomass=heat.q_biomass,
                q_net=heat.q_net,
                air_temperature=weather.temperature,
                dew_point=weather.dew_point,
                relative_humidity=weather.relative_humidity,
                cloud_cover=weather.cloud_cover,
                wind_speed_10m=weather.wind_speed,
                wind_speed_2m=heat.u2,
                direct_radiation=weather.direct_radiation,
                diffuse_radiation=weather.diffuse_radiation,
                solar_elevation=weather.solar_elevation,
                soil_temperature=weather.soil_temperature,
                precipitation=weather.precipitation,
                evap_l=evap_l,
                rainfall_l=rainfall_l,
                makeup_l=makeup_l,
                harvest_water_removed_l=harvest.water_removed_l,
                harvest_water_returned_l=harvest.water_returned_l,
                harvest_occurred=harvest.occurred,
                harvest_mass_kg=harvest.mass_kg,
            )
        )

        state.biomass = x_new
        state.temperature = t_new
        state.volume = v_new

        self._step_count += 1
        self._stats.steps_completed += 1
        return True

    def run(self) -> SimulationResult:
        """Run all remaining steps.

        Returns:
            SimulationResult with every timestep, the summary and geometry.
        """
        self._status = SimulationStatus.RUNNING
        logger.info(
            "Starting simulation: %d days from %02d:00, %.0f m² surface, mode=%s",
            self._total_days,
            self._start_hour,
            self._geometry.surface_area,
            self._config.harvest_mode,
        )

        start_wall = time.perf_counter()
        try:
            while self.step():
                pass
        finally:
            self._stats.wall_time = timedelta(seconds=time.perf_counter() - start_wall)

        self._status = SimulationStatus.STOPPED
        summary = self.summary()
        logger.info(
            "Simulation finished: %d steps, final density %.3f g/L, "
            "%.1f kg harvested over %d nights",
            self._stats.steps_completed,
            summary.final_density,
            summary.total_harvested_kg,
            summary.harvest_count,
        )
        return SimulationResult(
            timesteps=tuple(self._timesteps),
            summary=summary,
            geometry=self._geometry,
        )

    def summary(self) -> SimulationSummary:
        """Summarise the steps completed so far."""
        return summarize_timesteps(
            self._timesteps,
            total_days=self._total_days,
            harvest_count=self._harvest_count,
            final_density=self._state.biomass,
        )


def run_simulation(
    weather_days: Sequence[WeatherDay],
    config: PondConfig,
    total_days: int,
    *,
    start_hour: int = DEFAULT_START_HOUR,
    light_response: LightResponse | None = None,
    temperature_response: TemperatureResponse | None = None,
) -> SimulationResult:
    """Run a complete open-pond simulation.

    Args:
        weather_days: Weather days, cycled when shorter than the run.
        config: Pond configuration.
        total_days: Number of days to simulate.
        start_hour: Local hour of the first step.
        light_response: Override for the light model.
        temperature_response: Override for the temperature model.

    Returns:
        SimulationResult with ``total_days * 24`` timesteps.

    Raises:
        ValueError: On empty weather, ``total_days < 1`` or an invalid
            ``start_hour``.
    """
    engine = PondSimulationEngine(
        weather_days,
        config,
        total_days,
        start_hour=start_hour,
        light_response=light_response,
        temperature_response=temperature_response,
    )
    return engine.run()


def run_from_config(config: SimulationConfig) -> SimulationResult:
    """Build weather from a file configuration and run the simulation.

    Raises:
        ValueError: If the weather source yields no days.
        FileNotFoundError: If a weather file doesn't exist.
    """
    weather_days = weather_from_config(config.weather)
    return run_simulation(
        weather_days,
        config.pond,
        config.total_days,
        start_hour=config.start_hour,
    )
