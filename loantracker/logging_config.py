import logging
import os


def configure_logging(level='INFO'):
    numeric_level = getattr(logging, (level or 'INFO').upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s %(levelname)s %(name)s - %(message)s',
        force=True,  # create_app() may run more than once per process (tests)
    )

    # Reduce noise from chatty libraries
    for noisy in ('urllib3', 'werkzeug'):
        logging.getLogger(noisy).setLevel(os.getenv('NOISY_LOG_LEVEL', 'WARNING'))
    return numeric_level
