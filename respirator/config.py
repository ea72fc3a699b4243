from dataclasses import dataclass

DEFAULT_MAX_DEPTH = 64


@dataclass(frozen=True)
class DecoderConfig:
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        max_depth = int(self.max_depth)
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")
        object.__setattr__(self, "max_depth", max_depth)
