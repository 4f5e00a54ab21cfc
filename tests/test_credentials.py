from recipegram.api.credentials import (
    PasslibCredentialPolicy,
    PlaintextCredentialPolicy,
    get_credential_policy,
)


def test_passlib_hash_hides_password():
    policy = PasslibCredentialPolicy()
    stored = policy.hash("pw1")

    assert stored != "pw1"
    assert policy.verify("pw1", stored) is True
    assert policy.verify("pw2", stored) is False


def test_passlib_hashes_are_salted():
    policy = PasslibCredentialPolicy()
    assert policy.hash("same") != policy.hash("same")


def test_passlib_rejects_legacy_plaintext_row():
    assert PasslibCredentialPolicy().verify("pw1", "pw1") is False


def test_plaintext_policy_compares_exactly():
    policy = PlaintextCredentialPolicy()
    assert policy.hash("pw1") == "pw1"
    assert policy.verify("pw1", "pw1") is True
    assert policy.verify("PW1", "pw1") is False


def test_policy_selection():
    assert isinstance(get_credential_policy("plaintext"), PlaintextCredentialPolicy)
    assert isinstance(get_credential_policy("pbkdf2_sha256"), PasslibCredentialPolicy)
