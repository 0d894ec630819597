from dataclasses import dataclass, field
from typing import List

import yaml

from operatorhub.errors import ConfigError


@dataclass
class CRDConfig:
    name: str = ""
    display_name: str = ""
    description: str = ""


@dataclass
class PackageConfig:
    output_path: str = ""
    package_name: str = ""
    distribution_channel: str = ""
    operator_repo: str = ""
    ubi_only: bool = False
    digest_pinning: bool = False


@dataclass
class Config:
    new_version: str = ""
    prev_version: str = ""
    stack_version: str = ""
    crds: List[CRDConfig] = field(default_factory=list)
    packages: List[PackageConfig] = field(default_factory=list)

    def has_digest_pinning(self):
        return any(pkg.digest_pinning for pkg in self.packages)

    @classmethod
    def from_dict(cls, data):
        crds = [
            CRDConfig(
                name=_str(c, "name"),
                display_name=_str(c, "displayName"),
                description=_str(c, "description"),
            )
            for c in _list(data, "crds")
        ]
        packages = [
            PackageConfig(
                output_path=_str(p, "outputPath"),
                package_name=_str(p, "packageName"),
                distribution_channel=_str(p, "distributionChannel"),
                operator_repo=_str(p, "operatorRepo"),
                ubi_only=_bool(p, "ubiOnly"),
                digest_pinning=_bool(p, "digestPinning"),
            )
            for p in _list(data, "packages")
        ]
        return cls(
            new_version=_str(data, "newVersion"),
            prev_version=_str(data, "prevVersion"),
            stack_version=_str(data, "stackVersion"),
            crds=crds,
            packages=packages,
        )


def _str(data, key):
    value = data.get(key)
    if value is None:
        return ""
    # an unquoted 2.10 loads as the float 2.1
    if not isinstance(value, str):
        raise ConfigError("%s must be a string, got %r" % (key, value))
    return value


def _bool(data, key):
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ConfigError("%s must be a boolean, got %r" % (key, value))
    return value


def _list(data, key):
    items = data.get(key) or []
    if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
        raise ConfigError("%s must be a list of mappings" % key)
    return items


def load_config(path):
    try:
        with open(path, "r", encoding="utf-8") as stream:
            data = yaml.load(stream, Loader=yaml.SafeLoader)
    except OSError as err:
        raise ConfigError("failed to open file %s: %s" % (path, err)) from err
    except yaml.YAMLError as err:
        raise ConfigError("failed to unmarshal config from %s: %s" % (path, err)) from err

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("failed to unmarshal config from %s: expected a mapping" % path)

    try:
        return Config.from_dict(data)
    except ConfigError as err:
        raise ConfigError("failed to unmarshal config from %s: %s" % (path, err)) from err
