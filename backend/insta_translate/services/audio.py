"""录音文件读取与校验，产出转写请求所需的 base64 内容。"""

import base64
from dataclasses import dataclass
from pathlib import Path

import soundfile as sf
from loguru import logger

from insta_translate.errors import AudioUnavailable
from insta_translate.services.languages import AudioEncoding, encoding_for


@dataclass(frozen=True)
class AudioArtifact:
    """采集端产出的一段完整录音。"""

    path: Path
    platform: str

    @property
    def encoding(self) -> AudioEncoding:
        return encoding_for(self.platform)


def _probe_wav(path: Path) -> None:
    """LINEAR16 录音为 WAV，读取头部确认未损坏。"""
    try:
        info = sf.info(str(path))
    except RuntimeError as e:
        # soundfile.LibsndfileError 继承自 RuntimeError
        raise AudioUnavailable(f"无法解析音频文件: {path.name}") from e
    if info.frames <= 0:
        raise AudioUnavailable(f"音频文件不含采样: {path.name}")


def load_audio(artifact: AudioArtifact) -> str:
    """读取录音并返回 base64 字符串；缺失、为空或损坏时抛 AudioUnavailable。"""
    path = Path(artifact.path)
    if not path.is_file():
        raise AudioUnavailable(f"音频文件不存在: {path}")
    try:
        content = path.read_bytes()
    except OSError as e:
        raise AudioUnavailable(f"读取音频失败: {path}") from e
    if not content:
        raise AudioUnavailable(f"音频文件为空: {path}")

    if artifact.encoding.encoding == "LINEAR16":
        _probe_wav(path)

    logger.debug(f"{path.name=} {len(content)=} {artifact.platform=}")
    return base64.b64encode(content).decode("ascii")
