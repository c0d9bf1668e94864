# coding=utf-8
"""
Copyright (c) Huawei Technologies Co., Ltd. 2020-2028. All rights reserved.
Description: perf2profile -i perf.data -o profile.pb [-f]
FileName：main.py
Create Date: 2026/10/19
Notes:
    grouping, sample labels and worker count come from the convert config file,
    the command line only names the files.
"""
import argparse
import os
import re
import sys
import traceback
from typing import List, Optional

from perf2profile.converter import ProfileConverter, ProfileDocument
from perf2profile.errors import ConversionError, UsageError
from perf2profile.util.config import load_convert_config
from perf2profile.util.constant import CONVERT_CONFIG_PATH
from perf2profile.util.logging_utils import get_default_logger

logger = get_default_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


class ConvertArgs:
    def __init__(self, input_path: str, output_path: str, overwrite_output: bool) -> None:
        self.input_path = input_path
        self.output_path = output_path
        self.overwrite_output = overwrite_output

    def __eq__(self, other) -> bool:
        if isinstance(other, ConvertArgs):
            return vars(self) == vars(other)
        return False

    def __repr__(self):
        return f"ConvertArgs(input_path='{self.input_path}', output_path='{self.output_path}', " \
               f"overwrite_output={self.overwrite_output})"


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise UsageError(message)


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="perf2profile",
                             description="Convert a perf.data capture or PerfDataProto into pprof profiles",
                             add_help=False,
                             allow_abbrev=False)
    parser.add_argument('-i', '--input', dest="input_path", required=True,
                        help='perf.data file or serialized PerfDataProto to convert')
    parser.add_argument('-o', '--output', dest="output_path", required=True,
                        help='profile file to write')
    parser.add_argument('-f', '--force', dest="overwrite_output", action='store_true',
                        help='overwrite the output file if it already exists')
    return parser


def parse_arguments(argv: List[str]) -> ConvertArgs:
    """argv without the program name; every call gets a parser of its own."""
    args = _build_parser().parse_args(argv)
    return ConvertArgs(args.input_path, args.output_path, args.overwrite_output)


def usage() -> str:
    return _build_parser().format_usage()


OUTPUT_PATH_UNSAFE = re.compile(r"[^\w.:+-]")


def output_paths(output_path: str, documents: List[ProfileDocument]) -> List[str]:
    """One file per document; names are made file-system safe and unique within the run."""
    if len(documents) == 1:
        return [output_path]
    root, ext = os.path.splitext(output_path)
    paths = []
    for document in documents:
        stem = OUTPUT_PATH_UNSAFE.sub("_", document.name) or "profile"
        path = f"{root}.{stem}{ext}"
        suffix = 2
        while path in paths:
            path = f"{root}.{stem}-{suffix}{ext}"
            suffix += 1
        paths.append(path)
    return paths


def write_documents(output_path: str, documents: List[ProfileDocument], overwrite_output: bool) -> List[str]:
    """Write every document or none: files are staged next to their target and renamed at the end."""
    paths = output_paths(output_path, documents)
    existing = [path for path in paths if os.path.exists(path)]
    if existing and not overwrite_output:
        raise FileExistsError(f"output {existing[0]} already exists, pass -f to overwrite it")

    staged = []
    try:
        for path, document in zip(paths, documents):
            staging_path = f"{path}.tmp"
            staged.append(staging_path)
            with open(staging_path, "wb") as writer:
                writer.write(document.data)
    except OSError:
        for staging_path in staged:
            if os.path.exists(staging_path):
                os.remove(staging_path)
        raise

    for path, staging_path, document in zip(paths, staged, documents):
        os.replace(staging_path, path)
        logger.info(f"wrote {document.name} profile ({document.sample_count} samples) to {path}")
    return paths


def run(args: ConvertArgs, config_path: str = CONVERT_CONFIG_PATH) -> int:
    config = load_convert_config(config_path)
    converter = ProfileConverter(group_by=config["group_by"],
                                 sample_labels=config["sample_labels"],
                                 max_workers=config["max_workers"])

    with open(args.input_path, "rb") as reader:
        data = reader.read()
    documents = converter.convert(data)
    if not documents:
        logger.error(f"{args.input_path} holds no samples, nothing written")
        return EXIT_FAILURE

    write_documents(args.output_path, documents, args.overwrite_output)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    try:
        args = parse_arguments(sys.argv[1:] if argv is None else argv)
    except UsageError as e:
        sys.stderr.write(f"{usage()}perf2profile: error: {e}\n")
        return EXIT_USAGE

    try:
        return run(args)
    except (ConversionError, OSError, ValueError) as e:
        logger.error(f"converting {args.input_path} failed: {e}")
        logger.debug(traceback.format_exc())
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
