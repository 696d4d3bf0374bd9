"""Password hashing tests (fast: 4 bcrypt rounds)."""

from sentinent.auth.password import burn_verification, hash_password, verify_password


def test_hash_and_verify():
    hashed = hash_password("s3cret-pass", rounds=4)
    assert hashed.startswith("$2b$04$")
    assert verify_password("s3cret-pass", hashed)


def test_wrong_password_rejected():
    hashed = hash_password("s3cret-pass", rounds=4)
    assert not verify_password("s3cret-Pass", hashed)


def test_same_password_hashes_differ():
    """Salted: two users with the same password get different hashes."""
    assert hash_password("same", rounds=4) != hash_password("same", rounds=4)


def test_garbage_hash_is_a_mismatch_not_an_error():
    assert verify_password("anything", "not-a-bcrypt-hash") is False


def test_burn_verification_returns_nothing():
    assert burn_verification("whatever", rounds=4) is None
