"""流水线错误类型。fatal=True 的错误会终止运行（Failed），其余仅记录日志。"""


class PipelineError(Exception):
    fatal = True


class AudioUnavailable(PipelineError):
    """录音文件缺失、为空或已损坏；在任何网络调用前失败。"""


class TranscriptionFailed(PipelineError):
    pass


class TranslationFailed(PipelineError):
    pass


class RefinementFailed(PipelineError):
    fatal = False


class PersistenceFailed(PipelineError):
    fatal = False


class ServiceNotConfigured(PipelineError):
    """外部服务凭证未配置。"""


class UnsupportedTargetLanguage(PipelineError, ValueError):
    pass


class PipelineBusy(PipelineError):
    """同一会话已有进行中的运行。"""


class RunDiscarded(PipelineError):
    """运行已被取消，迟到的结果被丢弃。"""


class ServiceUnavailable(Exception):
    """可重试的临时故障：连接错误、超时、429 / 5xx。"""
