def canonical_pair(user_a: str, user_b: str) -> tuple[str, str]:
    """Order two user ids so {A, B} and {B, A} map to the same key."""
    return (user_a, user_b) if user_a <= user_b else (user_b, user_a)
