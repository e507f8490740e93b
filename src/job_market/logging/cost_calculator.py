"""Dollar estimate for the Claude calls made by a market analysis run."""

from __future__ import annotations

# USD per million tokens
MODEL_PRICING: dict[str, dict[str, float]] = {
    "claude-haiku-4-5-20251001": {"input": 1.00, "output": 5.00},
    "claude-sonnet-4-5-20250929": {"input": 3.00, "output": 15.00},
}


def calculate_cost(calls: list[tuple[str, int, int]]) -> float:
    """Price the token log kept by ``LLMClient``.

    ``calls`` is the ``"calls"`` entry of ``LLMClient.get_token_summary()``:
    one ``(model, input_tokens, output_tokens)`` entry per request. The CLI
    prints the total after ``analyze`` and the web app shows it under the
    report. Models missing from ``MODEL_PRICING`` add nothing to the sum.
    """
    total = 0.0
    for model, input_tokens, output_tokens in calls:
        rates = MODEL_PRICING.get(model)
        if rates is None:
            continue
        total += input_tokens * rates["input"] / 1_000_000
        total += output_tokens * rates["output"] / 1_000_000
    return total
