import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation

from taxisim.simulation.simulation import DispatchSimulation


class DispatchVisualization:
    def __init__(self, simulation: DispatchSimulation, update_interval: int = 50, window: int = 500):
        self.sim = simulation
        self.update_interval = update_interval
        self.window = window  # Number of ticks kept on screen

        # Setup the figure with two subplots side by side
        self.fig = plt.figure(figsize=(16, 6))
        self.fleet_ax = self.fig.add_subplot(121)  # Left subplot for the fleet
        self.stats_ax = self.fig.add_subplot(122)  # Right subplot for statistics
        self.fig.set_facecolor('white')

        # Initialize statistics tracking
        self.ticks = []
        self.occupied_counts = []
        self.waiting_counts = []
        self.assigned_counts = []
        self.archived_counts = []

        self.setup_fleet_plot()
        self.setup_stats_plot()
        self.anim = None

    def setup_fleet_plot(self):
        total = max(1, len(self.sim.taxis))
        self.fleet_bars = self.fleet_ax.bar(['occupied', 'free'], [0, total], color=['green', 'blue'])
        self.fleet_ax.set_ylim(0, total * 1.1)
        self.fleet_ax.set_title('Taxi Fleet')
        self.fleet_ax.set_ylabel('Taxis')

    def setup_stats_plot(self):
        """Initialize the statistics subplot"""
        self.stats_ax.set_title('System Statistics')
        self.stats_ax.set_xlabel('Tick')
        self.stats_ax.set_ylabel('Count')

        self.occupied_line, = self.stats_ax.plot([], [], 'g-', label='Occupied Taxis')
        self.waiting_line, = self.stats_ax.plot([], [], 'k-', label='Waiting Requests')
        self.assigned_line, = self.stats_ax.plot([], [], 'b-', label='Assigned Requests')
        self.archived_line, = self.stats_ax.plot([], [], 'r-', label='Archived Requests')

        self.stats_ax.legend(loc='upper left')
        self.stats_ax.grid(True)
        self.stats_ax.set_xlim(0, self.window)
        self.stats_ax.set_ylim(0, 10)

    def update(self, frame):
        """Step the simulation once and redraw"""
        summary = self.sim.step()

        self.ticks.append(summary.age)
        self.occupied_counts.append(summary.occupied_taxis)
        self.waiting_counts.append(summary.waiting_requests)
        self.assigned_counts.append(summary.assigned_requests)
        self.archived_counts.append(summary.archived_requests)

        # Keep only the last `window` ticks
        while self.ticks and self.ticks[0] <= summary.age - self.window:
            self.ticks.pop(0)
            self.occupied_counts.pop(0)
            self.waiting_counts.pop(0)
            self.assigned_counts.pop(0)
            self.archived_counts.pop(0)

        self.fleet_bars[0].set_height(summary.occupied_taxis)
        self.fleet_bars[1].set_height(summary.total_taxis - summary.occupied_taxis)

        self.occupied_line.set_data(self.ticks, self.occupied_counts)
        self.waiting_line.set_data(self.ticks, self.waiting_counts)
        self.assigned_line.set_data(self.ticks, self.assigned_counts)
        self.archived_line.set_data(self.ticks, self.archived_counts)

        self.stats_ax.set_xlim(max(0, summary.age - self.window), max(self.window, summary.age))
        max_count = max(
            max(self.occupied_counts + [0]),
            max(self.waiting_counts + [0]),
            max(self.assigned_counts + [0]),
            max(self.archived_counts + [0]),
        )
        self.stats_ax.set_ylim(0, max(10, max_count * 1.1))

        return (tuple(self.fleet_bars) +
                (self.occupied_line, self.waiting_line,
                 self.assigned_line, self.archived_line))

    def frames_left(self) -> int:
        return max(0, self.sim.runtime + 1 - self.sim.age)

    def show(self):
        # Axis limits change every frame, so no blitting
        self.anim = FuncAnimation(
            self.fig, self.update, interval=self.update_interval,
            frames=self.frames_left(), repeat=False, blit=False
        )
        plt.show()

    def save(self, path):
        self.fig.savefig(path)
