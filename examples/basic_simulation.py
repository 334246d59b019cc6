#!/usr/bin/env python3
"""Basic open-pond simulation example.

This script demonstrates how to run pond simulations using the pre-built
scenarios and a custom configuration.

Run with: uv run python examples/basic_simulation.py
"""

from pondsim.core.config import PondConfig, SimulationConfig, WeatherConfig
from pondsim.simulation.engine import run_from_config
from pondsim.simulation.scenarios import run_scenario


def run_summer_scenario() -> None:
    """Run a one-week summer growth simulation without harvest."""
    print("=" * 60)
    print("SUMMER SCENARIO: Spirulina raceway, no harvest")
    print("=" * 60)

    result = run_scenario("spirulina-summer", total_days=7)
    geometry = result.geometry

    print(f"Raceway: {geometry.total_length:.0f}m x {geometry.width:.0f}m")
    print(f"Surface: {geometry.surface_area:.0f} m², volume {geometry.volume_m3:.0f} m³")
    print()

    # Density at noon each day
    print("Noon Summary:")
    print("-" * 48)
    print(f"{'Day':>4} {'Density':>10} {'Pond T':>10} {'PAR avg':>10}")
    print(f"{'':>4} {'(g/L)':>10} {'(°C)':>10} {'(µmol)':>10}")
    print("-" * 48)
    for record in result.timesteps:
        if record.hour == 12:
            print(
                f"{record.day:>4} {record.biomass_concentration:>10.3f} "
                f"{record.pond_temperature:>10.1f} {record.par_avg_culture:>10.0f}"
            )
    print("-" * 48)

    summary = result.summary
    print(f"Final density: {summary.final_density:.3f} g/L")
    print(f"Pond temperature: {summary.min_temperature:.1f} - {summary.max_temperature:.1f}°C")
    print()


def run_custom_harvest() -> None:
    """Run a custom pond with nightly semi-continuous harvest."""
    print("=" * 60)
    print("CUSTOM POND: 1 ha, 300 mm, harvest above 0.8 g/L")
    print("=" * 60)

    config = SimulationConfig(
        name="Custom Harvest",
        total_days=10,
        pond=PondConfig(
            area_ha=1.0,
            aspect_ratio=10.0,
            depth=0.3,
            initial_density=0.5,
            harvest_mode="semi-continuous",
            harvest_threshold=0.8,
        ),
        weather=WeatherConfig(days=10, cloud_cover=20.0, rain_hour=17, rain_mm=2.0),
    )
    result = run_from_config(config)
    summary = result.summary

    print(f"Harvest nights: {summary.harvest_count}")
    print(f"Total harvested: {summary.total_harvested_kg:.1f} kg")
    print(f"Areal productivity: {summary.avg_productivity_areal:.1f} g/m²/day")
    print(f"Evaporation: {summary.total_evaporation_l:,.0f} L")
    print(f"Rainfall: {summary.total_rainfall_l:,.0f} L")
    print(f"Makeup water: {summary.total_makeup_l:,.0f} L")
    print()


if __name__ == "__main__":
    run_summer_scenario()
    run_custom_harvest()
