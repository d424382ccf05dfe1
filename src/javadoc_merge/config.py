# --- Merge configuration -----------------------------------------------------
"""
Tunable data for the merge core.

The wrap margins, punctuation and particle sets were tuned against the
Japanese JDK documentation; other languages are expected to swap them out
rather than patch the algorithms. Environment variables override the
defaults for the command line driver (see `MergeConfig.from_env`).
"""
import os
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class WrapSettings:
    """Constants of the byte-weighted line wrapper."""
    min_margin: int = 10  # start looking for a break at width - min_margin
    max_margin: int = 10  # force a break at width + max_margin
    skip_margin: int = 4  # keep the rest whole if it fits in width + skip_margin
    long_word_margin: int = 20  # ASCII runs of width - long_word_margin get their own line
    punctuation: str = "。、」・)}"
    particles: str = "はがのをにへとらてるや"


@dataclass(frozen=True)
class LayoutSettings:
    """Constants of the shrink/expand stage of comment synthesis."""
    initial_width: Optional[int] = None  # None renders without wrapping
    max_width: int = 160
    width_step: int = 4
    wide_width_step: int = 8
    step_threshold: int = 100
    decoration_lines: int = 2
    param_name_min: int = 3
    param_name_cap: int = 12
    sentence_terminators: tuple[str, ...] = ("。",)


@dataclass(frozen=True)
class LabelVocabulary:
    """
    Literal `dt` label texts of the documentation generator, per category.
    A new documentation format or locale only needs new entries here.
    """
    params: tuple[str, ...] = ("Parameters:", "パラメータ:")
    returns: tuple[str, ...] = ("Returns:", "戻り値:")
    throws: tuple[str, ...] = ("Throws:", "例外:")
    see: tuple[str, ...] = ("See Also:", "関連項目:")
    since: tuple[str, ...] = ("Since:", "導入されたバージョン:")
    deprecated: tuple[str, ...] = (
        "Deprecated, for removal: This API element is subject to removal in a future version.",
        "Deprecated.",
        "非推奨、削除用: このAPI要素は、将来のバージョンで削除される可能性があります。",
        "非推奨。",
        "推奨されていません。",
    )

    def category_of(self, label: str) -> Optional[str]:
        """Maps a `dt` label text to "params", "returns", "throws", "see" or "since"."""
        label = " ".join(label.split())
        for category in ("params", "returns", "throws", "see", "since"):
            if label in getattr(self, category):
                return category
        return None

    def deprecation_marker(self, text: str) -> Optional[str]:
        """Returns the longest deprecation marker `text` starts with, if any."""
        text = " ".join(text.split())
        for marker in sorted(self.deprecated, key=len, reverse=True):
            if text.startswith(marker):
                return marker
        return None


@dataclass(frozen=True)
class MergeConfig:
    """Everything one MergeEngine (and the directory driver) needs to know."""
    doc_encoding: str = "utf-8"
    source_encoding: str = "utf-8"
    output_encoding: str = "utf-8"
    jobs: int = 1
    layout: LayoutSettings = field(default_factory=LayoutSettings)
    wrap: WrapSettings = field(default_factory=WrapSettings)
    labels: LabelVocabulary = field(default_factory=LabelVocabulary)

    @classmethod
    def from_env(cls, **overrides) -> "MergeConfig":
        """
        Builds a config from JAVADOC_MERGE_* environment variables; explicit
        keyword overrides (e.g. from the command line) win over the environment.
        """
        values = {}
        for name in ("doc_encoding", "source_encoding", "output_encoding"):
            env_value = os.environ.get(f"JAVADOC_MERGE_{name.upper()}")
            if env_value:
                values[name] = env_value
        jobs = os.environ.get("JAVADOC_MERGE_JOBS")
        if jobs:
            values["jobs"] = int(jobs)
        wrap_width = os.environ.get("JAVADOC_MERGE_WRAP_WIDTH")
        if wrap_width:
            values["layout"] = LayoutSettings(initial_width=int(wrap_width))
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
