from shared.crypto import PasswordHasher


def test_hash_and_verify():
    hasher = PasswordHasher(iterations=1000)
    encoded = hasher.hash("s3cret")
    assert encoded.startswith("pbkdf2_sha256$1000$")
    assert "s3cret" not in encoded
    assert hasher.verify("s3cret", encoded)
    assert not hasher.verify("wrong", encoded)


def test_same_password_gets_a_fresh_salt():
    hasher = PasswordHasher(iterations=1000)
    assert hasher.hash("same") != hasher.hash("same")


def test_malformed_hash_never_verifies():
    hasher = PasswordHasher(iterations=1000)
    assert not hasher.verify("x", "")
    assert not hasher.verify("x", "plaintext")
    assert not hasher.verify("x", "md5$1$abc$def")
    assert not hasher.verify("x", "pbkdf2_sha256$notanumber$abc$def")
