import logging

__all__ = ["Log", "logger"]


class Log(object):
    level_set = False

    @staticmethod
    def set_loglevel(loglevel):
        global logger
        Log.get_logger().setLevel(loglevel)
        Log.get_logger().info("Set loglevel to %d" % loglevel)
        logger = Log.get_logger()
        Log.level_set = True

    @staticmethod
    def get_logger():
        return logging.getLogger("jaxkef")


if not Log.level_set:
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter('JAXKEF: %(levelname)s: %(asctime)s: %(module)s.%(funcName)s(): %(message)s'))
    Log.get_logger().addHandler(_handler)
    Log.get_logger().setLevel(logging.WARNING)
    Log.level_set = True

logger = Log.get_logger()
