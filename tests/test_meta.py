"""Tests for the canonical package model."""

import pytest

from sbom_parsers.meta import (
    Checksum,
    HashAlgorithm,
    License,
    Package,
    Supplier,
    SupplierType,
    get_hash_algorithm,
)


class TestGetHashAlgorithm:
    """Tests for hash algorithm lookup."""

    @pytest.mark.parametrize("name", ["sha256", "SHA256", "Sha256"])
    def test_case_insensitive(self, name):
        assert get_hash_algorithm(name) is HashAlgorithm.SHA256

    def test_all_members_resolve(self):
        for algorithm in HashAlgorithm:
            if algorithm is HashAlgorithm.UNSUPPORTED:
                continue
            assert get_hash_algorithm(algorithm.value.lower()) is algorithm

    def test_md4_is_not_md2(self):
        assert get_hash_algorithm("md4") is HashAlgorithm.MD4

    @pytest.mark.parametrize("name", ["rot13", "", "unsupported", "crc32"])
    def test_unknown_maps_to_unsupported(self, name):
        assert get_hash_algorithm(name) is HashAlgorithm.UNSUPPORTED

    def test_hyphenated_names_are_unsupported(self):
        assert get_hash_algorithm("sha-512") is HashAlgorithm.UNSUPPORTED


class TestChecksum:
    """Tests for lazily computed checksums."""

    def test_sha256_digest(self):
        checksum = Checksum(algorithm=HashAlgorithm.SHA256, content=b"abc")
        assert str(checksum) == (
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        )

    def test_md5_digest(self):
        checksum = Checksum(algorithm=HashAlgorithm.MD5, content=b"abc")
        assert str(checksum) == "900150983cd24fb0d6963f7d28e17f72"

    def test_value_is_cached(self):
        checksum = Checksum(algorithm=HashAlgorithm.SHA256, content=b"abc")
        first = str(checksum)

        assert checksum.value == first
        checksum.content = b"changed"
        assert str(checksum) == first

    def test_existing_value_is_not_recomputed(self):
        checksum = Checksum(algorithm=HashAlgorithm.SHA1, content=b"abc", value="deadbeef")
        assert str(checksum) == "deadbeef"

    @pytest.mark.parametrize(
        "algorithm",
        [HashAlgorithm.UNSUPPORTED, HashAlgorithm.MD2, HashAlgorithm.MD6],
    )
    def test_unavailable_algorithms_fall_back_to_sha1(self, algorithm):
        checksum = Checksum(algorithm=algorithm, content=b"abc")
        assert str(checksum) == "a9993e364706816aba3e25717850c26c9cd0d89d"

    def test_from_integrity(self):
        checksum = Checksum.from_integrity("sha1-mrVie5PmBiH/fNrF2pczAn3x0Ms=")

        assert checksum is not None
        assert checksum.algorithm is HashAlgorithm.SHA1
        assert str(checksum) == "9ab5627b93e60621ff7cdac5da9733027df1d0cb"

    @pytest.mark.parametrize("integrity", ["", "sha512", "sha512-***not base64***"])
    def test_from_invalid_integrity(self, integrity):
        assert Checksum.from_integrity(integrity) is None


class TestSupplier:
    """Tests for supplier rendering."""

    def test_email_suppressed_when_none(self):
        supplier = Supplier(type=SupplierType.ORGANIZATION, name="Acme", email="none")
        assert supplier.get() == "Organization: Acme"

    def test_email_suppressed_when_unknown(self):
        supplier = Supplier(type=SupplierType.PERSON, name="Jane", email="UNKNOWN")
        assert supplier.get() == "Person: Jane"

    def test_person_with_email(self):
        supplier = Supplier(type=SupplierType.PERSON, name="Jane", email="jane@x.com")
        assert supplier.get() == "Person: Jane (jane@x.com)"

    def test_empty_name(self):
        assert Supplier(name="").get() == ""

    def test_type_defaults_to_organization(self):
        supplier = Supplier(name="Acme")
        assert supplier.get() == "Organization: Acme"
        assert supplier.type is None

    def test_custom_formatter_overrides_default(self):
        supplier = Supplier.custom(lambda: "NOASSERTION", name="Acme")
        assert supplier.get() == "NOASSERTION"

    def test_custom_formatter_used_with_empty_name(self):
        supplier = Supplier.custom(lambda: "Organization: Fallback")
        assert supplier.get() == "Organization: Fallback"


class TestPackage:
    """Tests for the Package model."""

    def test_defaults_are_permissive(self):
        package = Package(name="left-pad")

        assert package.version == ""
        assert package.path == ""
        assert package.packages == {}
        assert not package.root

    def test_key(self):
        assert Package(name="left-pad", version="1.3.0").key == "left-pad@1.3.0"
        assert Package(name="left-pad").key == "left-pad"

    def test_empty_sentinel(self):
        assert Package.empty().is_empty()
        assert not Package(name="app", root=True).is_empty()

    def test_to_dict_nests_children(self):
        child = Package(name="b", version="2.0.0")
        parent = Package(
            name="a",
            version="1.0.0",
            root=True,
            other_licenses=[License(id="LicenseRef-1", name="Custom")],
            packages={"b": child},
        )

        data = parent.to_dict()

        assert data["root"] is True
        assert data["packages"]["b"]["version"] == "2.0.0"
        assert data["otherLicenses"][0]["id"] == "LicenseRef-1"
        assert len(data["checksum"]["value"]) == 40

    def test_to_dict_expands_shared_child_once(self):
        shared = Package(name="c", version="3.0.0")
        left = Package(name="a", version="1.0.0", packages={"c": shared})
        right = Package(name="b", version="1.0.0", packages={"c": shared})
        root = Package(name="app", root=True, packages={"a": left, "b": right})

        data = root.to_dict()

        assert data["packages"]["a"]["packages"]["c"]["version"] == "3.0.0"
        assert data["packages"]["b"]["packages"]["c"] == {"ref": "c@3.0.0"}

    def test_to_dict_flat_lists_dependency_names(self):
        parent = Package(
            name="a",
            packages={"z": Package(name="z"), "b": Package(name="b")},
        )
        assert parent.to_dict(nested=False)["packages"] == ["b", "z"]

    def test_equality_by_value(self):
        assert Package(name="a", version="1") == Package(name="a", version="1")
        assert Package(name="a", version="1") != Package(name="a", version="2")
