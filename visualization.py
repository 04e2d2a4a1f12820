"""Matplotlib view of the anomaly field and the drone fleet."""

from typing import Dict, List, Optional

import matplotlib.pyplot as plt
import matplotlib.patches as patches
from matplotlib.animation import FuncAnimation

import config
from drone import DroneStatus
from simulation import Simulation


class SimulationView:
    """
    Draws the intensity grid, drones, trails and a dashboard.

    Reads simulation state only; the animation timer calls tick() and then
    redraws.
    """

    STATUS_COLORS = {
        DroneStatus.ROAMING: '#377eb8',
        DroneStatus.SENSING: '#4daf4a',
        DroneStatus.RETURNING: '#ff7f00',
        DroneStatus.CHARGING: '#984ea3',
    }

    def __init__(self, simulation: Simulation, trail_length: int = 100):
        self.simulation = simulation
        self.trail_length = trail_length

        self.fig = None
        self.ax = None
        self.ax_dashboard = None
        self.field_image = None
        self.drone_artists: List[Dict] = []
        self.dashboard_text = None
        self.animation: Optional[FuncAnimation] = None

    def setup_plot(self) -> None:
        """Set up the matplotlib figure and axes with dashboard."""
        p = self.simulation.params
        self.fig = plt.figure(figsize=(16, 9))

        # Main grid view (left)
        self.ax = self.fig.add_axes([0.05, 0.1, 0.55, 0.85])
        self.ax.set_xlim(-0.5, p.grid_width - 0.5)
        self.ax.set_ylim(-0.5, p.grid_height - 0.5)
        self.ax.set_aspect('equal')
        self.ax.set_xlabel('X (cells)')
        self.ax.set_ylabel('Y (cells)')
        self.ax.set_title('Anomaly Field & Drone Fleet')

        self.field_image = self.ax.imshow(
            self.simulation.grid_snapshot(),
            origin='lower', cmap='inferno', vmin=0.0, vmax=1.0,
            interpolation='nearest', zorder=1
        )
        self.fig.colorbar(self.field_image, ax=self.ax, fraction=0.046, pad=0.04,
                          label='Intensity')

        # Dashboard panel (right)
        self.ax_dashboard = self.fig.add_axes([0.68, 0.1, 0.30, 0.85])
        self.ax_dashboard.set_xlim(0, 1)
        self.ax_dashboard.set_ylim(0, 1)
        self.ax_dashboard.axis('off')
        self.ax_dashboard.set_title('Dashboard', fontsize=14, fontweight='bold')
        self.dashboard_text = self.ax_dashboard.text(
            0.02, 0.98, '', transform=self.ax_dashboard.transAxes,
            verticalalignment='top', fontsize=9,
            fontfamily='monospace',
            bbox=dict(boxstyle='round', facecolor='white', alpha=0.9, edgecolor='gray')
        )

        self._init_drone_markers()
        self._add_legend()
        self.fig.canvas.mpl_connect('key_press_event', self._on_key_press)

    def _init_drone_markers(self) -> None:
        self.drone_artists = []
        for drone in self.simulation.drones:
            color = self.STATUS_COLORS[drone.status]
            marker, = self.ax.plot([drone.x], [drone.y], marker='o', markersize=8,
                                   color=color, markeredgecolor='white', zorder=10)
            trail, = self.ax.plot([], [], color='white', alpha=0.4, linewidth=1, zorder=5)
            label = self.ax.text(drone.x, drone.y + 0.8, f'D{drone.id}',
                                 ha='center', va='bottom', fontsize=8,
                                 fontweight='bold', color='white', zorder=11)
            self.drone_artists.append({'marker': marker, 'trail': trail, 'label': label})

    def _add_legend(self) -> None:
        legend_elements = [
            patches.Patch(facecolor=color, edgecolor='black', label=status.value.title())
            for status, color in self.STATUS_COLORS.items()
        ]
        self.ax.legend(handles=legend_elements, loc='upper right', fontsize=8)

    def _on_key_press(self, event) -> None:
        """q quits, space pauses/resumes, r resets."""
        if event.key == 'q':
            self.simulation.stop()
            plt.close(self.fig)
        elif event.key == ' ':
            if self.simulation.is_running:
                self.simulation.stop()
            else:
                self.simulation.start()
        elif event.key == 'r':
            self.simulation.reset()
            self.simulation.start()

    def update_visualization(self) -> None:
        """Redraw the grid, drones and dashboard from current state."""
        self.field_image.set_data(self.simulation.grid_snapshot())

        for drone, artist in zip(self.simulation.drones, self.drone_artists):
            color = self.STATUS_COLORS[drone.status]
            artist['marker'].set_data([drone.x], [drone.y])
            artist['marker'].set_color(color)
            artist['label'].set_position((drone.x, drone.y + 0.8))

            trail = list(self.simulation.trajectories[drone.id])[-self.trail_length:]
            artist['trail'].set_data([p[0] for p in trail], [p[1] for p in trail])

        self.dashboard_text.set_text(self.generate_dashboard_content())

    def generate_dashboard_content(self) -> str:
        """Text block with time, metrics and per-drone state."""
        sim = self.simulation
        m = sim.metrics
        lines = []

        lines.append(f"{'═' * 40}")
        lines.append(f"  TIME: {sim.simulation_time:.1f}s  |  "
                     f"{'RUNNING' if sim.is_running else 'PAUSED'}")
        lines.append(f"{'═' * 40}")
        lines.append("")

        lines.append("┌─── FIELD ─────────────────────────────┐")
        lines.append(f"│ Live anomalies: {m.live_anomaly_count}")
        lines.append(f"│ Area above threshold: {m.field_coverage_fraction:.1%}")
        lines.append(f"│ Cells visited: {m.visited_fraction:.1%}")
        lines.append("└───────────────────────────────────────┘")
        lines.append("")

        lines.append("┌─── DRONES ────────────────────────────┐")
        lines.append(f"│ Roaming: {m.roaming_drones} | Charging: {m.charging_drones}")
        for drone in sim.drones:
            energy_pct = drone.energy / drone.energy_capacity
            lines.append(f"│ D{drone.id}: {drone.status.value.upper():<9} "
                         f"{energy_pct:4.0%}  meas={len(drone.measurements)}")
        lines.append("└───────────────────────────────────────┘")
        lines.append("")
        lines.append("  q = quit | space = pause | r = reset")

        return '\n'.join(lines)

    def run(self, max_time: float = 300.0, realtime: bool = True) -> None:
        """Animate the simulation until max_time or the window is closed."""
        self.setup_plot()
        self.simulation.start()

        def animate(frame):
            if self.simulation.simulation_time >= max_time:
                self.simulation.stop()
            self.simulation.tick()
            self.update_visualization()

        interval = int(self.simulation.params.tick_duration * 1000) if realtime else 1
        self.animation = FuncAnimation(self.fig, animate, interval=interval,
                                       cache_frame_data=False)
        plt.show(block=True)
        self.simulation.stop()


def save_field_image(simulation: Simulation, path: str) -> None:
    """Render the current grid and drone positions to an image file."""
    view = SimulationView(simulation)
    view.setup_plot()
    view.update_visualization()
    view.fig.savefig(path, dpi=config.CELL_SIZE_PX * 8)
    plt.close(view.fig)
