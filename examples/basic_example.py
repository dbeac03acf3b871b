"""Basic example of using the orbit simulator."""

from orbit_sim import SimulationController
from orbit_sim.loader import get_system
from orbit_sim.physics.diagnostics import Diagnostics


def main():
    """Run our solar system for a simulated year, then rewind six months."""
    system = get_system("ours")

    # One-hour base step, symplectic Euler by default
    sim = SimulationController(system, dt=3600.0, verbose=True)
    diagnostics = Diagnostics.for_integrator(sim.integrator)

    print("Running simulation...")
    print(f"Initial energy: {diagnostics.compute_energies(system)[2]:.6e}")

    for day in range(365):
        sim.run(24)
        if day % 73 == 0:
            current = sim.current_system
            energy = diagnostics.compute_energies(current)[2]
            print(f"Day {day}: index={sim.current_index}, Energy={energy:.6e}")

    # Only the newest 10,000 hours are retained
    print(f"History window: {sim.index_range}")

    sim.enter_review()
    sim.move_review_cursor(-24 * 182)
    earth = sim.current_system.body("Earth")
    print(f"Earth six months ago: {earth.position}")

    sim.resume()
    sim.set_speed(2.0)
    sim.run(24)
    print(f"Branched and ran one more day at 2x: t={sim.current_system.time / 86400.0:.1f} days")
    print("Simulation complete!")


if __name__ == "__main__":
    main()
