"""
Layered configuration.

Keys are read from three INI-style layers, highest priority first:

- temporary values given on the command line with -c;
- the user file, written by ``jdkfetch config KEY VALUE``;
- the global file.

Both files live in $JDKFETCH_CONFIG_PATH when set, otherwise in
~/.config/jdkfetch (%APPDATA%\\jdkfetch on Windows).
"""

from configparser import ConfigParser, NoOptionError, NoSectionError
import os

from jdkfetch import filesystem as fs
from jdkfetch import utils
from jdkfetch.error import InvalidArgumentError, raise_error, raise_error_if


GLOBAL = "global"
USER = "user"
CLI = "cli"


def _config_dir():
    if os.getenv("JDKFETCH_CONFIG_PATH"):
        return os.getenv("JDKFETCH_CONFIG_PATH")
    if os.name == "nt":
        return fs.path.join(os.getenv("APPDATA", fs.path.join(fs.userhome(), "AppData", "Roaming")), "jdkfetch")
    return fs.path.join(fs.userhome(), ".config", "jdkfetch")


class ConfigFile(ConfigParser):
    """ A configuration layer, optionally backed by a file. """

    def __init__(self, location):
        super().__init__(interpolation=None)
        self.location = location

    def load(self):
        if self.location:
            self.read(self.location)

    def save(self):
        if not self.location:
            return
        dirname = fs.path.dirname(self.location)
        if dirname:
            fs.makedirs(dirname)
        with open(self.location, "w") as f:
            self.write(f)

    def set(self, section, key, value):
        if not self.has_section(section):
            self.add_section(section)
        super().set(section, key, value)

    def delete(self, section, key):
        try:
            removed = self.remove_option(section, key)
        except NoSectionError:
            return False
        if removed and not self.options(section):
            self.remove_section(section)
        return removed


class Config(object):
    def __init__(self):
        self._layers = []

    def add_layer(self, name, location=None):
        layer = ConfigFile(location)
        self._layers.append((name, layer))
        return layer

    def layers(self, name=None):
        """ Returns layers in priority order, highest first. """
        return [layer for n, layer in reversed(self._layers) if name is None or n == name]

    def get(self, section, key, default=None, layer=None):
        for config in self.layers(layer):
            try:
                return config.get(section, key)
            except (NoOptionError, NoSectionError):
                continue
        return default

    def set(self, section, key, value, layer):
        for config in self.layers(layer):
            config.set(section, key, value)

    def delete(self, section, key, layer=None):
        return sum(int(config.delete(section, key)) for config in self.layers(layer))

    def items(self, layer=None):
        values = {}
        for config in reversed(self.layers(layer)):
            for section in config.sections():
                for key, value in config.items(section):
                    values[(section, key)] = value
        return sorted((section, key, value) for (section, key), value in values.items())

    def load(self):
        for config in self.layers():
            config.load()

    def save(self, layer=None):
        for config in self.layers(layer):
            config.save()


_config = Config()
_config.add_layer(GLOBAL, fs.path.join(_config_dir(), "config"))
_config.add_layer(USER, fs.path.join(_config_dir(), "user"))
_cli = _config.add_layer(CLI)
_config.load()


def split_key(key):
    """ Splits 'section.key' into its two parts. """
    section_key = key.split(".", 1)
    raise_error_if(len(section_key) != 2 or not all(section_key),
                   "Invalid configuration key: '{}', expected section.key", key,
                   type=InvalidArgumentError)
    return section_key[0], section_key[1]


def get(section, key, default=None, expand=True, layer=None):
    value = _config.get(section, key, default, layer)
    return utils.expand_path(value) if expand and isinstance(value, str) else value


def _convert(section, key, default, convert, expected):
    value = get(section, key, default)
    if value is None:
        return None
    try:
        return convert(value)
    except ValueError:
        raise_error("Config: value '{}' invalid for '{}.{}', expected {}",
                    value, section, key, expected, type=InvalidArgumentError)


def getint(section, key, default=None):
    return _convert(section, key, default, int, "integer")


def getfloat(section, key, default=None):
    return _convert(section, key, default, float, "number")


def getboolean(section, key, default=None):
    value = get(section, key, default)
    return value is not None and str(value).lower() in ["true", "yes", "on", "1"]


def get_jdkfetch_home():
    if os.name == "nt":
        return fs.path.join(os.getenv("LOCALAPPDATA", fs.path.join(fs.userhome(), "AppData", "Local")), "jdkfetch")
    return fs.path.join(fs.userhome(), ".jdkfetch")


def get_logpath():
    return get("jdkfetch", "logpath", get_jdkfetch_home())


def get_cachedir():
    return get("jdkfetch", "cachedir", fs.path.join(fs.userhome(), ".jdks"))


def get_api_url():
    return get("github", "api", "https://api.github.com/repos/adoptium").rstrip("/")


def get_github_token():
    return get("github", "token", os.getenv("GITHUB_TOKEN"), expand=False) or None


def get_timeout():
    """ Returns the (connect, read) timeout of HTTP requests in seconds. """
    return (getfloat("http", "timeout_connect", 10.0), getfloat("http", "timeout_read", 60.0))


def get_retries():
    return getint("http", "retries", 3)


def keep_archive():
    return getboolean("jdkfetch", "keep_archive", True)


def set(section, key, value, layer=USER):
    _config.set(section, key, value, layer)


def delete(section, key, layer=None):
    return _config.delete(section, key, layer)


def items(layer=None):
    return _config.items(layer)


def load_or_set(file_or_str):
    """ Loads a file into the command line layer, or sets a section.key=value pair. """
    if fs.path.exists(file_or_str):
        _cli.read(file_or_str)
        return

    key_value = file_or_str.split("=", 1)
    raise_error_if(len(key_value) != 2, "Syntax error in configuration: '{}'",
                   file_or_str, type=InvalidArgumentError)
    section, key = split_key(key_value[0])
    _cli.set(section, key, key_value[1])


def save(layer=None):
    _config.save(layer)
