"""Unit tests for forked spec splicing."""

from __future__ import annotations

import copy

import pytest

from core.errors import ForkOffSpecError
from core.types import GenesisSpec, StorageOverride
from splice.spec_splicer import count_retained_pairs, splice_fork_spec


def _spec(name: str, chain_id: str, top: dict[str, str], protocol_id: str | None) -> GenesisSpec:
    spec: GenesisSpec = {
        "name": name,
        "id": chain_id,
        "genesis": {"raw": {"top": top, "childrenDefault": {}}},
    }
    if protocol_id is not None:
        spec["protocolId"] = protocol_id
    return spec


def _splice(
    snapshot: list[tuple[str, str]],
    prefixes: tuple[str, ...],
    overrides: tuple[StorageOverride, ...] = (),
    template_top: dict[str, str] | None = None,
    original_protocol_id: str | None = "ksmcc3",
) -> GenesisSpec:
    original = _spec("kusama", "ks", {}, original_protocol_id)
    template = _spec("Development", "dev", dict(template_top or {}), "dot")
    return splice_fork_spec(original, template, snapshot, prefixes, "0061736d", overrides)


def test_splice_rewrites_identity_from_original() -> None:
    """Name and id get the -fork suffix and protocolId is copied."""
    spliced = _splice([], ())

    assert (spliced["name"], spliced["id"], spliced["protocolId"]) == (
        "kusama-fork",
        "ks-fork",
        "ksmcc3",
    )


def test_splice_drops_protocol_id_when_original_has_none() -> None:
    """A missing protocolId on the original is carried over as absent."""
    spliced = _splice([], (), original_protocol_id=None)

    assert "protocolId" not in spliced


def test_end_to_end_scenario() -> None:
    """Only prefixed pairs survive and deleting an absent key is a no-op."""
    spliced = _splice(
        [("0xaa11", "0x01"), ("0xbb22", "0x02")],
        ("0xaa",),
        overrides=(StorageOverride(key="0xcc33", value=None),),
    )
    top = dict(spliced["genesis"]["raw"]["top"])
    top.pop("0x3a636f6465")

    assert top == {"0xaa11": "0x01"}


def test_overrides_win_over_transplanted_values() -> None:
    """An override for a snapshot key should replace the snapshot value."""
    spliced = _splice(
        [("0xaa11", "0x01")],
        ("0xaa",),
        overrides=(StorageOverride(key="0xaa11", value="0x02"),),
    )

    assert spliced["genesis"]["raw"]["top"]["0xaa11"] == "0x02"


def test_delete_override_removes_transplanted_key() -> None:
    """Delete overrides also run after the transplant."""
    spliced = _splice(
        [("0xaa11", "0x01")],
        ("0xaa",),
        overrides=(StorageOverride(key="0xaa11", value=None),),
    )

    assert "0xaa11" not in spliced["genesis"]["raw"]["top"]


def test_unmatched_pairs_keep_template_values() -> None:
    """Pairs outside the prefix set never replace the template's own storage."""
    spliced = _splice(
        [("0xbb22", "0x02")],
        ("0xaa",),
        template_top={"0xbb22": "0xfe"},
    )

    assert spliced["genesis"]["raw"]["top"]["0xbb22"] == "0xfe"


def test_runtime_code_replaces_template_code() -> None:
    """The code key should hold the source chain's runtime as 0x-prefixed hex."""
    spliced = _splice([("0x3a636f6465", "0x00")], ("0x3a",), template_top={"0x3a636f6465": "0x01"})

    assert spliced["genesis"]["raw"]["top"]["0x3a636f6465"] == "0x0061736d"


def test_splice_leaves_template_untouched() -> None:
    """Splicing works on a copy of the template."""
    original = _spec("kusama", "ks", {}, "ksmcc3")
    template = _spec("Development", "dev", {"0x01": "0x01"}, "dot")
    template_before = copy.deepcopy(template)

    splice_fork_spec(original, template, [("0xaa11", "0x01")], ("0xaa",), "00", ())

    assert template == template_before


def test_splice_requires_raw_storage() -> None:
    """A non-raw template spec cannot be spliced."""
    original = _spec("kusama", "ks", {}, None)
    template = {"name": "Development", "id": "dev", "genesis": {"runtime": {}}}

    with pytest.raises(ForkOffSpecError):
        splice_fork_spec(original, template, [], (), "00", ())


def test_splice_requires_original_identity() -> None:
    """The original spec must carry a name and id."""
    original: GenesisSpec = {"genesis": {"raw": {"top": {}}}}
    template = _spec("Development", "dev", {}, "dot")

    with pytest.raises(ForkOffSpecError):
        splice_fork_spec(original, template, [], (), "00", ())


def test_count_retained_pairs_matches_prefix_filter() -> None:
    """Counting should mirror the transplant filter."""
    snapshot = [("0xaa11", "0x01"), ("0xbb22", "0x02"), ("0xaa12", "0x03")]

    assert count_retained_pairs(snapshot, ("0xaa",)) == 2 and count_retained_pairs(snapshot, ()) == 0
