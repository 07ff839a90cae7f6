"""配置异常定义模块."""

from ..exceptions import EsMaintError


class ConfigError(EsMaintError):
    """配置异常.

    当配置文件无法读取、YAML 格式错误或配置项类型不合法时抛出。
    """

    pass
