config_env = dict(
    # grid parameters
    map_size=20,
    grass_amount=40,
    thick_vegetation_amount=20,
    # shelter parameters (cell ids, 1-based row-major)
    rabbit_shelter_ids=[45, 110, 175, 290, 355],
    fox_shelter_ids=[62, 238, 337],
    shelter_capacity=5,
    roster_size=3,  # adults per shelter at start, alternating female/male
    # run parameters
    timeout_between_simulation_steps=200,  # milliseconds
    logs_enabled=True,
    seed=None,
)

run_config = dict(
    max_steps=1000,
    log_every=10,
    render=False,
    render_cell_size=24,
    render_fps=10,
    live_plot=False,
    live_plot_interval=5,
    plot_path=None,  # e.g. "/tmp/predpreyshelter.png"
)
