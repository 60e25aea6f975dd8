import asyncio
import logging
from typing import List, NamedTuple, Optional

from ytmp4.config.settings import config
from ytmp4.models.internal import DownloadIntent, MediaMetadata

logger = logging.getLogger(__name__)

READ_SIZE = 64 * 1024


class CompletedProcess(NamedTuple):
    """Subprocess result"""
    returncode: int
    stderr: bytes


class SubprocessTimeout(asyncio.TimeoutError):
    """Raised after a process outlived its deadline and was killed"""

    def __init__(self, timeout: float, stderr: bytes = b""):
        super().__init__(f"Process killed after {timeout:g}s")
        self.timeout = timeout
        self.stderr = stderr


class BoundedTail:
    """Keeps only the last `limit` bytes written to it"""

    def __init__(self, limit: int):
        self.limit = limit
        self._buf = bytearray()

    def feed(self, data: bytes) -> None:
        if self.limit <= 0:
            return
        self._buf += data
        if len(self._buf) > self.limit:
            del self._buf[:-self.limit]

    def getvalue(self) -> bytes:
        return bytes(self._buf)


async def _drain(stream: Optional[asyncio.StreamReader], sink: Optional[BoundedTail]) -> None:
    """Read a pipe until EOF so the child never blocks on a full buffer"""
    if stream is None:
        return
    while True:
        chunk = await stream.read(READ_SIZE)
        if not chunk:
            break
        if sink is not None:
            sink.feed(chunk)


class SubprocessExecutor:
    """Execute subprocess with consistent error handling"""

    @staticmethod
    async def run(
        cmd: List[str],
        timeout: float,
        cwd: Optional[str] = None,
        stderr_limit: int = 4000
    ) -> CompletedProcess:
        """
        Run subprocess with timeout and proper cleanup.

        stdout is discarded, stderr is kept up to `stderr_limit` trailing bytes.
        On timeout the process is killed with SIGKILL and SubprocessTimeout is
        raised. Spawn errors (FileNotFoundError, PermissionError...) propagate
        unchanged.
        """
        process = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=cwd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            stdin=asyncio.subprocess.DEVNULL
        )
        logger.debug("Spawned %s (pid %s)", cmd[0], process.pid)

        stderr_tail = BoundedTail(stderr_limit)

        try:
            await asyncio.wait_for(
                asyncio.gather(
                    process.wait(),
                    _drain(process.stdout, None),
                    _drain(process.stderr, stderr_tail),
                ),
                timeout=timeout
            )

            return CompletedProcess(
                returncode=process.returncode,
                stderr=stderr_tail.getvalue()
            )

        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            logger.warning("Killed %s (pid %s) after %.1fs", cmd[0], process.pid, timeout)
            raise SubprocessTimeout(timeout, stderr_tail.getvalue())
        finally:
            # Also covers cancellation of the awaiting request
            if process.returncode is None:
                process.kill()
                await process.wait()


class YTDLPCommandBuilder:
    """Build yt-dlp commands"""

    @staticmethod
    def build_download_command(
        intent: DownloadIntent,
        metadata: MediaMetadata,
        output_template: str,
        cookies_file: Optional[str] = None
    ) -> List[str]:
        """Build command downloading a single video into output_template"""
        cmd = [
            config.ytdlp.binary,
            '-f', metadata.format_str,
        ]

        if intent.audio_only:
            cmd.extend([
                '-x',
                '--audio-format', metadata.ext,
                '--audio-quality', config.ytdlp.audio_quality,
            ])
        else:
            cmd.extend([
                '--merge-output-format', metadata.ext,
                # Keep the video stream, always re-encode audio to AAC
                '--postprocessor-args', config.ytdlp.postprocessor_args,
            ])

        cmd.extend([
            '-o', output_template,
            '--no-playlist',
            '--user-agent', config.ytdlp.user_agent,
            '--referer', config.ytdlp.referer,
        ])

        if cookies_file:
            cmd.extend(['--cookies', cookies_file])

        # URL last
        cmd.append(intent.url)

        return cmd
