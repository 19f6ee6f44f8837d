from __future__ import annotations

from collections.abc import Sequence

from .data import Token


def token_features(tokens: Sequence[Token], index: int) -> dict[str, object]:
    text = tokens[index].text
    lower = text.lower()
    features: dict[str, object] = {
        "bias": 1.0,
        "lower": lower,
        "prefix2": lower[:2],
        "suffix3": lower[-3:],
        "is_title": text.istitle(),
        "is_upper": text.isupper(),
        "is_digit": text.isdigit(),
        "is_punct": not text[0].isalnum(),
    }
    if index > 0:
        prev = tokens[index - 1].text
        features["prev_lower"] = prev.lower()
        features["prev_is_title"] = prev.istitle()
    else:
        features["bos"] = True
    if index < len(tokens) - 1:
        nxt = tokens[index + 1].text
        features["next_lower"] = nxt.lower()
        features["next_is_title"] = nxt.istitle()
    else:
        features["eos"] = True
    return features


def sentence_features(tokens: Sequence[Token]) -> list[dict[str, object]]:
    return [token_features(tokens, i) for i in range(len(tokens))]
