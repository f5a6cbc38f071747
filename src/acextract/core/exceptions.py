"""项目内使用的自定义异常定义。"""


class ACExtractError(Exception):
    """基础异常类型。"""


class InvalidConfigurationError(ACExtractError):
    """配置不合法时抛出。"""


class OutputPathIsNotDirectoryError(ACExtractError):
    """输出路径已存在但不是目录。"""


class OutputDirectoryCreationError(ACExtractError):
    """无法创建输出目录。"""


class RenditionMissingDataError(ACExtractError):
    """资源既没有位图数据也没有矢量数据。"""


class CannotSaveImageError(ACExtractError):
    """位图获取、PNG 编码或写入失败。"""


class CannotCreatePDFDocumentError(ACExtractError):
    """矢量资源无法导出（当前不支持 PDF 导出）。"""


class InvalidDataError(ACExtractError):
    """Contents.json 内容无法解析。"""
