"""Extractor plugin — wires host events, group state, and chat commands together.

Lifecycle:
    plugin = ExtractorPlugin(settings)
    plugin.attach(hub)          # or plugin.attach_logger(host_logger)
    plugin.run_command("think", group_id)
    plugin.dispose()            # unsubscribe + clear state

If the host offers no subscription hook, ingestion stays off and every
command answers with the "no content" message.
"""

import logging
from typing import Any, Callable, Optional

from .config import CommandConfig, ExtractorSettings, load_settings
from .errors import HookUnavailableError, UnknownCommandError
from .events import ResponseHub, ResponseLogBridge
from .extraction import GroupStateStore, ResponseIngestor, render_template

logger = logging.getLogger("chatextract.plugin")

# User-facing replies
MSG_NO_SESSION = "无法获取会话信息"
MSG_NO_CONTENT = "当前没有可用的标签内容"
MSG_NO_TAGS = "当前没有配置任何标签。"
MSG_NO_COMMANDS = "当前没有配置任何指令。"

USAGE = """提取模型回复中的 XML 标签内容，并通过自定义指令输出。

## 配置步骤

**1. 定义标签** → 设置要提取的 XML 标签（如 `think`、`memory`）

**2. 创建指令** → 为每个指令设置名称和输出格式

## 可用变量

| 变量 | 说明 |
|------|------|
| `{name}` | 角色名称 |
| `{标签名}` | 对应标签的内容 |

## 示例

配置标签：`think`, `memory`

| 指令 | 格式 | 输出 |
|------|------|------|
| 思考 | `{name}在想：{think}` | syn在想：嗯？新人？ |
| 记忆 | `{name}的记忆：{memory}` | syn的记忆：1.[临时] 群友打招呼 |
"""


def _resolve_hook(service: Any) -> tuple[Callable, Callable]:
    subscribe = getattr(service, "subscribe", None)
    unsubscribe = getattr(service, "unsubscribe", None)
    if not callable(subscribe) or not callable(unsubscribe):
        raise HookUnavailableError(
            f"{type(service).__name__} has no subscribe/unsubscribe hook"
        )
    return subscribe, unsubscribe


class ExtractorPlugin:
    """Extracts tagged sections from model replies and serves them as commands."""

    name = "chatextract"

    def __init__(self, settings: Optional[ExtractorSettings] = None):
        self.settings = settings or load_settings()
        self.store = GroupStateStore()
        self.ingestor = ResponseIngestor(
            self.store,
            tags=self.settings.tags,
            show_logs=self.settings.show_logs,
        )
        self._unsubscribe: Optional[Callable] = None
        self._bridge: Optional[ResponseLogBridge] = None

    @property
    def ingestion_active(self) -> bool:
        return self._unsubscribe is not None

    # ── Host wiring ──

    def attach(self, service: Any) -> bool:
        """Subscribe to a host event source (anything with subscribe/unsubscribe).

        Returns:
            True if the service was subscribed (False if already attached
            or the service has no hook).
        """
        if self.ingestion_active:
            logger.warning("Already attached; detach first")
            return False

        try:
            subscribe, unsubscribe = _resolve_hook(service)
        except HookUnavailableError as e:
            logger.warning(f"Cannot observe model responses, ingestion disabled: {e}")
            return False

        subscribe(self.ingestor.handle_event)
        self._unsubscribe = lambda: unsubscribe(self.ingestor.handle_event)
        logger.info(f"{self.name} started ({len(self.settings.tags)} tags, {len(self.settings.commands)} commands)")
        return True

    def attach_logger(self, target: Optional[logging.Logger]) -> bool:
        """Observe a host logger that writes "model response: ..." records."""
        if not isinstance(target, logging.Logger):
            logger.warning("Cannot observe model responses, ingestion disabled: no host logger")
            return False

        if self.ingestion_active:
            logger.info(f"{self.name} re-attaching to logger '{target.name}'")
            self.detach()

        hub = ResponseHub()
        if not self.attach(hub):
            return False
        self._bridge = ResponseLogBridge(hub)
        self._bridge.attach(target)
        return True

    def detach(self):
        """Stop ingesting. Stored state is kept."""
        if self._bridge is not None:
            self._bridge.detach()
            self._bridge = None
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
            logger.debug(f"{self.name} unsubscribed from host events")
        self.ingestor.reset()

    def dispose(self):
        """Teardown: detach and drop all group state."""
        self.detach()
        self.store.clear()
        logger.info(f"{self.name} disposed")

    # ── Commands ──

    def render(self, command: CommandConfig, group_id: Optional[str]) -> str:
        """Render a command for a group, or an informational message."""
        if group_id is None:
            return MSG_NO_SESSION

        contents = self.store.get(group_id)
        if not contents:
            return MSG_NO_CONTENT

        return render_template(
            command.format,
            self.settings.character_name,
            contents,
            self.settings.tags,
        )

    def run_command(self, name: str, group_id: Optional[str]) -> str:
        """Run a configured command by name.

        Raises:
            UnknownCommandError: name is not a configured command
        """
        command = self.settings.get_command(name)
        if command is None:
            raise UnknownCommandError(f"Unknown command: {name}")
        return self.render(command, group_id)

    def command_handler(self, command: CommandConfig) -> Callable[[Optional[str]], str]:
        """Return a handler bound to one command: handler(group_id) -> reply."""
        def _handler(group_id: Optional[str]) -> str:
            return self.render(command, group_id)
        _handler.__name__ = f"cmd_{command.name}"
        return _handler

    def describe_tags(self) -> str:
        if not self.settings.tags:
            return MSG_NO_TAGS
        lines = "\n".join(f"- {{{t}}}" for t in self.settings.tags)
        return f"当前配置的标签变量：\n{lines}"

    def describe_commands(self) -> str:
        if not self.settings.commands:
            return MSG_NO_COMMANDS
        lines = "\n".join(f"- {c.name}：{c.format}" for c in self.settings.commands)
        return f"当前配置的指令：\n{lines}"

    @property
    def usage(self) -> str:
        return USAGE
