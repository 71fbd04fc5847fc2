# logger_setup.py

import logging
import os
import json

LOGGER_NAME = "canyon_stream"
SESSION_LOG = "session.log"


def _session_header(config):
    """One summary line per launch, so appended sessions can be told apart in session.log."""
    display = config.get('display', {})
    sim = config.get('simulation', {})
    budget = sim.get('session_budget_range')
    budget_text = f"{budget[0]:.1f}-{budget[1]:.1f}s" if budget else "n/a"
    return (f"Session start. seed={config.get('master_seed', 'n/a')}, "
            f"fps={display.get('fps', 'n/a')}, scale={display.get('scale', 'n/a')}, "
            f"budget={budget_text}, latch_stream={sim.get('latch_stream', True)}, "
            f"unlimited_resource={sim.get('unlimited_resource', False)}")


def setup_logging(config_path='config.json'):
    """
    Sets up the "canyon_stream" logger for one session.

    Every launch with the same run_id appends to runs/<run_id>/session.log
    (next to the config file) and opens with a header line carrying the seed
    and the stream settings of that launch. Console output mirrors the file.
    The logger does not propagate, so pygame and Numba chatter on the root
    logger stays out of the session log.

    Data Contract:
    - Inputs: config_path (str) - Path to the configuration file.
    - Outputs: The configured logging.Logger.
    - Side Effects:
        - Replaces (and closes) any handlers from an earlier call.
        - Creates runs/<run_id>/ and appends to session.log.
    - Invariants: The config file contains 'run_id' and a 'logging' dictionary
      with 'level' and 'format'. 'display' and 'simulation' are optional here.
    """
    with open(config_path, 'r') as f:
        config = json.load(f)

    run_id = config['run_id']
    log_config = config['logging']

    log_dir = os.path.join(os.path.dirname(os.path.abspath(config_path)), 'runs', run_id)
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, SESSION_LOG)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_config['level'])
    logger.propagate = False
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(log_config['format'])
    for handler in (logging.FileHandler(log_file, mode='a'), logging.StreamHandler()):
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info(_session_header(config))
    logger.info(f"Logging initialized. Run ID: {run_id}. Log file: {log_file}")
    return logger
