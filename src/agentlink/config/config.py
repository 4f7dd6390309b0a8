"""
Layered configuration files, loaded with configobj and validated against a schema.
"""
import os
import platform

from configobj import ConfigObj, ConfigObjError, Section
from validate import Validator

from agentlink.errors import ConfigurationError

# The default extension for configuration files
config_extension = '.cfg'

# the directory holding the configuration shipped with the package
default_directory = os.path.dirname(__file__)


def config_flavor(name, flavor=None):
    configname = name if not flavor else name + '.' + flavor
    return configname


def config_filename(name, directory=None):
    """
    Determines the location of a config file in the given directory.
    """
    config_file = os.path.join(directory or default_directory, name + config_extension)
    return config_file


def load_config_file_base(file, must_exist=True):
    """
    Loads a configuration file
    :param file:        The configuration file to load
    :param must_exist:  when True, the file must exist or an exception is thrown.
    :return: The ConfigObj instance for the file.
    """
    try:
        return ConfigObj(file, interpolation='Template', file_error=must_exist) \
            if must_exist or os.path.exists(file) else ConfigObj()
    except ConfigObjError as e:
        raise type(e)(str(e) + ' at ' + file)


def load_configspec(file):
    """
    Loads a validation schema. Schema values are check expressions such as
    integer(min=1, default=10), so they are not split into lists.
    """
    if not os.path.exists(file):
        raise ConfigurationError("no configuration schema at %s" % file)
    return ConfigObj(file, interpolation=False, list_values=False, _inspec=True)


def config_flavor_file(name, directory, subpart=None) -> ConfigObj:
    """
    Loads a specialization of a config file. The configuration file is expected to be named
    after the base, followed by a period and then the specialization, if the specialization is given,
    otherwise just the base name.
    :param name:    The name of the base configuration
    :param subpart: The name of the specialization.
    :return: The ConfigObj for the configuration file.
    """
    configname = config_flavor(name, subpart)
    file = config_filename(configname, directory)
    config = load_config_file_base(file, False)
    return config


def map_os_name(name):
    """
    >>> map_os_name('Windows')
    'windows'
    >>> map_os_name("Darwin")
    'osx'
    """
    name = name.lower()
    if name == 'darwin':
        name = 'osx'
    return name


def os_name():
    return map_os_name(platform.system())


def load_config(name, directory=None):
    """
        Loads all the configuration files that relate to the given name.
        Configurations are merged in this order, later ones winning:
        - the default specialization
        - the platform specialization
        - the user override
        - the base configuration
        The merged configuration is then validated against the schema specialization.
    :directory: the location of the configuration files
    :return: the validated ConfigObj
    """
    directory = directory or default_directory
    local_config = config_flavor_file(name, directory)
    default_config = config_flavor_file(name, directory, 'default')
    platform_config = config_flavor_file(name, directory, os_name())
    user_config = load_config_file_base(os.path.expanduser(
        '~/' + name + config_extension), must_exist=False)
    config = ConfigObj()
    config.merge(default_config)
    config.merge(platform_config)
    config.merge(user_config)
    config.merge(local_config)

    config.configspec = load_configspec(config_filename(config_flavor(name, 'schema'), directory))
    validator = Validator()
    result = config.validate(validator)
    if result is not True:
        raise ConfigObjError("the config file %s failed validation %s" % (name, result))
    return config


def fetch_conf_path(conf: Section, path):
    """
    Retrieves the named configuration section
    :param conf:        The root configuration
    :param path:        An iterable that lists the names of the sections to resolve
    :return: The configuration section identified by the path, or None
    """
    for p in path:    # lookup specific section
        conf = conf.get(p, None)
        if conf is None:
            return
    return conf


def load_section(config_path, name='agentlink', directory=None) -> Section:
    """
    Loads the configuration and retrieves a section from it.
    :param config_path: the dotted path of the section, e.g. 'daemon'
    """
    conf = load_config(name, directory)
    section = fetch_conf_path(conf, config_path.split('.'))
    if section is None:
        raise ConfigurationError("no section '%s' in configuration %s" % (config_path, name))
    return section
