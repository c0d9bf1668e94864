# coding=utf-8
import logging
import os

LOGGER_LEVEL_ENV = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR
}

LOG_FILE_ROOT = os.path.join(os.getenv('_APP_LOG_DIR', ""), 'log')
LOG_FILE_NAME = "perf2profile.log"

LOG_LEVEL = LOGGER_LEVEL_ENV.get(os.getenv("PERF2PROFILE_LOG_LEVEL", "INFO").upper(), logging.INFO)
# 压缩文件数量
MAX_BACKUP_COUNT = 5
# 单位是兆
FILE_SIZE = 50

PRINT_LOG_TO_CONSOLE = os.getenv("PERF2PROFILE_LOG_TO_CONSOLE", "true").lower() != "false"
MAX_SIZE = FILE_SIZE * 1024 * 1024

LOGGER_CONTENT_FORMAT = "%(asctime)s.%(msecs)03d(%(process)d|%(thread)d)\
[%(levelname)s][%(module)s:%(lineno)d]%(message)s"

LOGGER_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
