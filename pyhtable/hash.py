_DJB2_SEED = 5381
_U64_MASK = (1 << 64) - 1


def hash_string(key: str) -> int:
    # djb2, see http://www.cse.yorku.ca/~oz/hash.html
    hash = _DJB2_SEED
    # surrogatepass keeps lone surrogates hashable and distinct
    for c in key.encode("utf-8", "surrogatepass"):
        hash = ((hash << 5) + hash + c) & _U64_MASK  # hash * 33 + c
    return hash
