from __future__ import annotations

from pathlib import Path

from .train import NerTagger

MODEL_FILENAME = "ner_model.joblib"


def write_model(artifact_dir: Path, tagger: NerTagger) -> Path:
    from joblib import dump

    model_path = artifact_dir / "models" / MODEL_FILENAME
    model_path.parent.mkdir(parents=True, exist_ok=True)
    dump(tagger, model_path)
    return model_path


def load_model(model_path: str | Path) -> NerTagger:
    from joblib import load

    tagger = load(Path(model_path))
    if not isinstance(tagger, NerTagger):
        raise TypeError(f"{model_path} does not contain a NerTagger (got {type(tagger).__name__})")
    return tagger
