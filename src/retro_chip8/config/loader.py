import re
import yaml
from typing import Dict, Any, Optional

from retro_chip8.core.errors import ConfigError
from .models import (
    SystemConfig, MachineConfig, DisplayConfig, AudioConfig, DEFAULT_KEYMAP, ERROR_POLICIES
)

_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")

class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        try:
            with open(path, 'r', encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        return self.parse(data or {})

    def load_from_string(self, text: str) -> SystemConfig:
        return self.parse(yaml.safe_load(text) or {})

    def parse(self, data: Dict[str, Any]) -> SystemConfig:
        if not isinstance(data, dict):
            raise ConfigError("Configuration root must be a mapping.")
        return SystemConfig(
            machine=self._parse_machine(self._section(data, "machine")),
            display=self._parse_display(self._section(data, "display")),
            audio=self._parse_audio(self._section(data, "audio")),
            keymap=self._parse_keymap(data.get("keymap")),
        )

    # @intent:utility_function セクションを取り出します。省略時は空、マッピング以外はConfigError。
    def _section(self, data: Dict[str, Any], name: str) -> Dict[str, Any]:
        section = data.get(name)
        if section is None:
            return {}
        if not isinstance(section, dict):
            raise ConfigError(f"{name} must be a mapping: {section!r}")
        return section

    def _parse_machine(self, data: Dict[str, Any]) -> MachineConfig:
        defaults = MachineConfig()
        speed = self._parse_int(data.get("speed", defaults.speed), "machine.speed")
        if speed <= 0:
            raise ConfigError(f"machine.speed must be positive: {speed}")
        timer_hz = self._parse_float(data.get("timer_hz", defaults.timer_hz), "machine.timer_hz")
        if timer_hz <= 0:
            raise ConfigError(f"machine.timer_hz must be positive: {timer_hz}")
        seed = data.get("seed")
        on_error = str(data.get("on_error", defaults.on_error)).lower()
        if on_error not in ERROR_POLICIES:
            raise ConfigError(f"machine.on_error must be one of {ERROR_POLICIES}: {on_error}")
        return MachineConfig(
            speed=speed,
            timer_hz=timer_hz,
            seed=None if seed is None else self._parse_int(seed, "machine.seed"),
            on_error=on_error,
        )

    def _parse_display(self, data: Dict[str, Any]) -> DisplayConfig:
        defaults = DisplayConfig()
        scale = self._parse_int(data.get("scale", defaults.scale), "display.scale")
        if scale <= 0:
            raise ConfigError(f"display.scale must be positive: {scale}")
        return DisplayConfig(
            scale=scale,
            on_color=self._parse_color(data.get("on_color", defaults.on_color), "display.on_color"),
            off_color=self._parse_color(data.get("off_color", defaults.off_color), "display.off_color"),
        )

    def _parse_audio(self, data: Dict[str, Any]) -> AudioConfig:
        defaults = AudioConfig()
        volume = self._parse_float(data.get("volume", defaults.volume), "audio.volume")
        if not 0.0 <= volume <= 1.0:
            raise ConfigError(f"audio.volume must be between 0 and 1: {volume}")
        frequency = self._parse_float(data.get("frequency", defaults.frequency), "audio.frequency")
        if frequency <= 0:
            raise ConfigError(f"audio.frequency must be positive: {frequency}")
        enabled = data.get("enabled", defaults.enabled)
        if not isinstance(enabled, bool):
            raise ConfigError(f"audio.enabled must be true or false: {enabled!r}")
        return AudioConfig(frequency=frequency, volume=volume, enabled=enabled)

    def _parse_keymap(self, data: Optional[Dict[Any, Any]]) -> Dict[str, int]:
        if data is None:
            return dict(DEFAULT_KEYMAP)
        if not isinstance(data, dict):
            raise ConfigError(f"keymap must be a mapping: {data!r}")
        keymap = {}
        for name, value in data.items():
            code = self._parse_int(value, f"keymap.{name}")
            if not 0 <= code <= 0xF:
                raise ConfigError(f"keymap.{name} must map to a hex key 0x0-0xF: {value}")
            keymap[str(name).upper()] = code
        return keymap

    def _parse_int(self, value: Any, key: str = "value") -> int:
        if isinstance(value, bool):
            raise ConfigError(f"Invalid integer for {key}: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                if value.lower().startswith("0x"):
                    return int(value, 16)
                return int(value)
            except ValueError:
                pass
        raise ConfigError(f"Invalid integer for {key}: {value}")

    def _parse_float(self, value: Any, key: str) -> float:
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid number for {key}: {value}") from e

    def _parse_color(self, value: Any, key: str) -> str:
        if not isinstance(value, str) or not _COLOR_PATTERN.match(value):
            raise ConfigError(f"Invalid color for {key} (expected #RRGGBB): {value}")
        return value.upper()
