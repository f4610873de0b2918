from quadmom.base.base_solver import BaseSolver, load_config
