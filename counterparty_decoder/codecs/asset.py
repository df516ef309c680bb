"""Numeric asset id to asset name conversion."""

BTC = "BTC"
XCP = "XCP"
NUMERIC_OR_SUBASSET = "numerical-or-subasset"

# 26**12 + 1: first id of numeric ("A" prefixed) and subasset ids
MIN_NUMERIC_ASSET_ID = 95428956661682177

B26_DIGITS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def asset_name(asset_id: int) -> str:
    """Resolve an asset id to BTC, XCP or its alphabetic name."""
    asset_id = int(asset_id)
    if asset_id < 0:
        raise ValueError(f"Asset id must be non-negative: {asset_id}")
    if asset_id == 0:
        return BTC
    if asset_id == 1:
        return XCP
    if asset_id >= MIN_NUMERIC_ASSET_ID:
        return NUMERIC_OR_SUBASSET

    name = ""
    n = asset_id
    while True:
        mod = n % 26
        name = B26_DIGITS[mod] + name
        n = (n - mod) // 26
        if n == 0:
            break
    return name
