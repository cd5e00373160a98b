import pytest

from txscan.application.scanner import BlockScanner, Pacer
from txscan.domain.models import Match

from conftest import ALICE, BOB, CAROL, FakeChainReader, tx


def scanner_for(reader, sleep, interval=5.0):
    return BlockScanner(reader, Pacer(interval, sleep))


@pytest.mark.asyncio
async def test_emits_matches_in_block_then_transaction_order(sink, sleep):
    reader = FakeChainReader({
        10: [tx(10, 0, BOB, ALICE), tx(10, 1, BOB, CAROL), tx(10, 2, ALICE, CAROL)],
        11: [tx(11, 0, CAROL, BOB)],
        12: [tx(12, 0, CAROL, ALICE)],
    })
    stats = await scanner_for(reader, sleep).scan(ALICE, 10, 12, sink)

    assert [(b.number, t.hash) for b, t in sink.emitted] == [
        ("0xa", tx(10, 0, BOB, ALICE).hash),
        ("0xa", tx(10, 2, ALICE, CAROL).hash),
        ("0xc", tx(12, 0, CAROL, ALICE).hash),
    ]
    assert stats.as_dict() == {"blocks_ok": 3, "blocks_failed": 0, "transactions_seen": 5, "matches": 3}


@pytest.mark.asyncio
async def test_fetches_each_block_once_in_ascending_order(sink, sleep):
    reader = FakeChainReader()
    await scanner_for(reader, sleep).scan(ALICE, 95, 100, sink)
    assert reader.requested == ["0x5f", "0x60", "0x61", "0x62", "0x63", "0x64"]


@pytest.mark.asyncio
async def test_failed_block_is_skipped_and_scan_continues(sink, sleep):
    reader = FakeChainReader({
        1: [tx(1, 0, ALICE, BOB)],
        2: [tx(2, 0, ALICE, BOB)],
        3: [tx(3, 0, BOB, ALICE)],
    }, failing=[2])
    stats = await scanner_for(reader, sleep).scan(ALICE, 1, 3, sink)

    assert [b.number for b, _ in sink.emitted] == ["0x1", "0x3"]
    assert reader.requested == ["0x1", "0x2", "0x3"]
    assert (stats.blocks_ok, stats.blocks_failed, stats.matches) == (2, 1, 2)


@pytest.mark.asyncio
async def test_unexpected_fetch_exception_is_also_skipped(sink, sleep):
    class Flaky(FakeChainReader):
        async def get_block_by_number(self, block_hex):
            if block_hex == "0x1":
                raise RuntimeError("boom")
            return await super().get_block_by_number(block_hex)

    reader = Flaky({2: [tx(2, 0, ALICE, BOB)]})
    stats = await scanner_for(reader, sleep).scan(ALICE, 1, 2, sink)
    assert stats.blocks_failed == 1
    assert len(sink.emitted) == 1


@pytest.mark.asyncio
async def test_paces_after_every_block_including_failures(sink, sleep):
    reader = FakeChainReader(failing=[3])
    await scanner_for(reader, sleep, interval=1.5).scan(ALICE, 1, 4, sink)
    assert sleep.calls == [1.5, 1.5, 1.5, 1.5]


@pytest.mark.asyncio
async def test_zero_interval_never_sleeps(sink, sleep):
    await scanner_for(FakeChainReader(), sleep, interval=0).scan(ALICE, 1, 3, sink)
    assert sleep.calls == []


@pytest.mark.asyncio
async def test_address_match_is_case_sensitive(sink, sleep):
    upper = "0x" + "AB" * 20
    lower = upper.lower()
    reader = FakeChainReader({1: [tx(1, 0, lower, BOB), tx(1, 1, BOB, upper)]})
    await scanner_for(reader, sleep).scan(upper, 1, 1, sink)
    assert [t.recipient for _, t in sink.emitted] == [upper]


@pytest.mark.asyncio
async def test_contract_creation_matches_on_sender(sink, sleep):
    reader = FakeChainReader({1: [tx(1, 0, ALICE, "")]})
    await scanner_for(reader, sleep).scan(ALICE, 1, 1, sink)
    assert len(sink.emitted) == 1
    assert Match.of(*sink.emitted[0]).recipient == ""


@pytest.mark.asyncio
async def test_inverted_range_scans_nothing(sink, sleep):
    reader = FakeChainReader()
    stats = await scanner_for(reader, sleep).scan(ALICE, 10, 9, sink)
    assert reader.requested == []
    assert sleep.calls == []
    assert stats.blocks_ok == 0


@pytest.mark.asyncio
async def test_on_block_reports_progress(sink, sleep):
    seen = []
    reader = FakeChainReader(failing=[6])
    await scanner_for(reader, sleep).scan(ALICE, 5, 7, sink, on_block=lambda n, ok: seen.append((n, ok)))
    assert seen == [(5, True), (6, False), (7, True)]


def test_match_line_format():
    from txscan.domain.models import Block
    t = tx(95, 0, ALICE, BOB, value="0x6f05b59d3b20000")
    line = Match.of(Block("0x5f", (t,)), t).line()
    assert line == (f"Transaction: Block 0x5f | Hash: {t.hash} | From: {ALICE} | "
                    f"To: {BOB} | Value: 0.500000 ETH")
