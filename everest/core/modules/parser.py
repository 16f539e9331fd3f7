from __future__ import annotations

"""
Module metadata parser (decode -> stamp -> normalize -> repair).

Runs once per discovered module, possibly from several discovery workers at
once. It keeps no state between calls: every call builds its own record and
only writes to that record and the log.

A document that cannot be decoded never raises out of here. It is logged and
the caller gets None, meaning "skip this module".
"""

import io
import os
import zipfile
from typing import IO, Any, Optional, Union

import yaml

from everest.core.config.models import DEFAULT_LOADER_CONFIG, LoaderConfig
from everest.core.errors import MetadataDecodeError
from everest.core.logger import get_logger
from everest.core.modules.models import ModuleDependency, ModuleMetadata
from everest.core.modules.version import ModuleVersion

DocumentSource = Union[str, bytes, IO[str], IO[bytes]]


def decode_document(reader: DocumentSource) -> ModuleMetadata:
    """
    Structured decode of a metadata document into a draft record.

    BaseLoader keeps every scalar as text, so "Version: 1.10" stays "1.10"
    instead of becoming the float 1.1.
    """
    try:
        raw = yaml.load(reader, Loader=yaml.BaseLoader)
    except yaml.YAMLError as e:
        raise MetadataDecodeError(f"YAML error: {e}") from e
    if raw is None:
        raise MetadataDecodeError("decoder returned an empty result")
    if not isinstance(raw, dict):
        raise MetadataDecodeError(f"document is not a mapping (got {type(raw).__name__})")
    try:
        return ModuleMetadata.from_document(raw)
    except Exception as e:  # noqa: BLE001
        raise MetadataDecodeError(f"invalid metadata: {e}") from e


def normalize_dll_path(directory: str, dll: str) -> str:
    if not directory or not dll:
        return dll
    native = dll.replace("/", os.sep).replace("\\", os.sep)
    return os.path.join(directory, native)


class MetadataParser:
    def __init__(self, *, config: Optional[LoaderConfig] = None, logger: Any = None):
        self.config = config or DEFAULT_LOADER_CONFIG
        self.logger = logger if logger is not None else get_logger(self.config.log_category)

    def parse(self, archive: str, directory: str, reader: DocumentSource) -> Optional[ModuleMetadata]:
        try:
            meta = decode_document(reader)
        except Exception as e:  # noqa: BLE001
            where = archive or directory or "<stream>"
            self.logger.warning(f"Failed parsing module metadata in {where}: {e}")
            return None

        meta.path_archive = str(archive or "")
        meta.path_directory = str(directory or "")

        if meta.path_directory:
            meta.dll = normalize_dll_path(meta.path_directory, meta.dll)

        self.repair_platform_dependency(meta)
        return meta

    def repair_platform_dependency(self, meta: ModuleMetadata) -> None:
        """
        Every mod must depend on the platform. Legacy alias entries are renamed up
        to the first platform entry; entries after it are left alone. Mods with no
        platform dependency get one at the minimum version, first.
        """
        platform = self.config.platform_name
        alias = self.config.legacy_platform_alias
        for dep in meta.dependencies:
            if alias and dep.name == alias:
                dep.name = platform
            if dep.name == platform:
                return

        self.logger.warning(
            f"No dependency to {platform} found in {meta}! Adding dependency to {platform} {self.config.minimum_platform_version}..."
        )
        meta.dependencies.insert(
            0, ModuleDependency(name=platform, version=ModuleVersion.parse(self.config.minimum_platform_version))
        )


def parse_metadata(
    archive: str,
    directory: str,
    reader: DocumentSource,
    *,
    config: Optional[LoaderConfig] = None,
    logger: Any = None,
) -> Optional[ModuleMetadata]:
    return MetadataParser(config=config, logger=logger).parse(archive, directory, reader)


def read_metadata_document(path: str, *, config: Optional[LoaderConfig] = None) -> bytes:
    """
    Read the raw metadata document of a mod at `path` (an unpacked directory or
    a .zip). File names are tried in configured order.
    """
    cfg = config or DEFAULT_LOADER_CONFIG
    if os.path.isdir(path):
        for name in cfg.metadata_file_names:
            candidate = os.path.join(path, name)
            if os.path.isfile(candidate):
                with open(candidate, "rb") as f:
                    return f.read()
    elif zipfile.is_zipfile(path):
        with zipfile.ZipFile(path) as zf:
            members = set(zf.namelist())
            for name in cfg.metadata_file_names:
                if name in members:
                    return zf.read(name)
    else:
        raise FileNotFoundError(f"Not a mod directory or zip archive: {path}")
    raise FileNotFoundError(f"No metadata document ({', '.join(cfg.metadata_file_names)}) in {path}")


def parse_metadata_at(path: str, *, config: Optional[LoaderConfig] = None, logger: Any = None) -> Optional[ModuleMetadata]:
    """
    Convenience for tools: read and parse the metadata of the mod at `path`.
    Raises OSError (FileNotFoundError when there is no document) or
    zipfile.BadZipFile for a damaged archive.
    """
    raw = read_metadata_document(path, config=config)
    full = os.path.abspath(path)
    if os.path.isdir(full):
        return parse_metadata("", full, io.BytesIO(raw), config=config, logger=logger)
    return parse_metadata(full, "", io.BytesIO(raw), config=config, logger=logger)
