import logging

__version__ = '0.1.0'

logger = logging.getLogger('flvreader')
handler = logging.StreamHandler()
formatter = logging.Formatter("%(levelname)-7s %(name)-20s %(message)s (%(pathname)s:%(lineno)d)")
handler.setFormatter(formatter)
logger.addHandler(handler)
