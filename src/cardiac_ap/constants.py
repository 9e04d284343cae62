# ------------------- Aliev-Panfilov model constants -------------------------

#: Excitation threshold ``a``.
A = 0.1
#: Recovery offset ``b``.
B = 0.1
#: Reaction gain ``kk``.
KK = 8.0
#: First recovery saturation constant ``M1``.
M1 = 0.07
#: Second recovery saturation constant ``M2``.
M2 = 0.3
#: Restitution rate ``epsilon``.
EPSILON = 0.01
#: Diffusion coefficient ``d``.
D = 5e-5

# ------------------- Run defaults -------------------------------------------

#: Simulated-time horizon.
T_FINAL = 1000.0
#: Square grid size (interior cells per side).
GRID_SIZE = 200
#: Snapshot period in simulated-time units (0 disables snapshots).
PLOT_FREQ = 0.0
#: Work-group sizing hint (threads per block side / rows per task).
BLOCK_SIZE = 16
#: Default kernel backend.
BACKEND = "numba"

# ------------------- Numerics -----------------------------------------------

#: Fraction of the stability bound used as the timestep.
SAFETY_FACTOR = 0.95
#: Value written into the excited half of the initial condition.
INITIAL_LEVEL = 1.0

# ------------------- Telemetry ----------------------------------------------

#: Floating-point operations per cell update.
FLOPS_PER_CELL = 28
#: Fields touched per cell update.
FIELDS_PER_CELL = 4
#: Bytes per sample (float64).
BYTES_PER_SAMPLE = 8

# ------------------- Visualization ------------------------------------------

#: Matplotlib ``imshow`` interpolation.
IMSHOW_INTERPOLATION = "nearest"
#: Default snapshot output directory.
SNAPSHOT_DIR = "snapshots"

#: Kernel backends known to the simulator.
BACKENDS = ("numpy", "numba", "cuda")
