#!/usr/bin/env python3
# ==========================================================
#   MD2 : Production Validation Suite
#   Version  : v0.1
#   Author   : JXPH
# ==========================================================

import os, sys, time, json, csv, argparse, secrets, cProfile
from datetime import datetime, timezone
from collections import Counter

# --- Import from reference implementation ---
from md2 import (
    Md2,
    Md2Core,
    Md2Hash,
    BlockSize,
    OutputSize,
)

# ==========================================================
#   CONFIGURATION
# ==========================================================

AvalancheTrials       = 256
AvalancheMsgBytes     = 64
IncrementalTrials     = 64
ThroughputSamples     = 16
ProfileHashes         = 32
FastModeFactor        = 0.1

# RFC 1319, appendix A.5
KnownAnswers = {
    b"": "8350e5a3e24c153df2275c9f80692773",
    b"a": "32ec01ec4a6dac72c0ab96fb34c0b5d1",
    b"abc": "da853b0d3f88d99b30283a69e6ded6bb",
    b"message digest": "ab4f496bfb2a530b219ff33031fe06b0",
    b"abcdefghijklmnopqrstuvwxyz": "4e8ddff3650292ab5a4108c3aa47940b",
    b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789":
        "da33def2a42df13975352846c30338cd",
    b"1234567890" * 8: "d5976f79d83d3a0dc9806c3c66f3efd8",
    b"hello world": "d9cce882ee690a5c1ce70beff3a78c77",
}

# ==========================================================
#   HELPERS
# ==========================================================

def MkDir(path):
    os.makedirs(path, exist_ok=True)

def TimeStamp():
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")

def SaveJSON(path, obj):
    with open(path, "w") as f:
        json.dump(obj, f, indent=2)

def AppendCSV(path, header, rows):
    write_header = not os.path.exists(path)
    with open(path, "a", newline="") as f:
        w = csv.writer(f)
        if write_header: w.writerow(header)
        for r in rows: w.writerow(r)

def BitCount(b: bytes):
    return sum(bin(x).count("1") for x in b)

def ByteFreq(digests):
    cnt = Counter()
    for d in digests: cnt.update(d)
    total = sum(cnt.values())
    return {i: cnt[i]/total for i in range(256)}

def BitFreq(digests):
    counts = [0]*(len(digests[0])*8)
    for d in digests:
        bits = ''.join(f"{x:08b}" for x in d)
        for i,ch in enumerate(bits): counts[i] += (ch == '1')
    total = len(digests)
    return [counts[i]/total for i in range(len(counts))]

def RandomSplit(data: bytes):
    chunks, i = [], 0
    while i < len(data):
        n = 1 + secrets.randbelow(2 * BlockSize + 1)
        chunks.append(data[i:i+n])
        i += n
    return chunks

# ==========================================================
#   CORE TESTS
# ==========================================================

def RunKATs(outroot):
    path = os.path.join(outroot, "kats.json")
    data, failures = {}, 0
    print("[KAT] checking RFC 1319 known answers...")
    for m, expected in KnownAnswers.items():
        h = Md2Hash(m).hex()
        status = "ok" if h == expected else "MISMATCH"
        failures += (h != expected)
        data[m.decode("utf-8", errors="replace")] = {"digest": h, "status": status}
        print(f"  {repr(m)[:40]} -> {h} [{status}]")
    SaveJSON(path, data)
    return {"vectors": len(KnownAnswers), "failures": failures}

def RunAvalanche(outroot, fast=False):
    trials = AvalancheTrials if not fast else int(AvalancheTrials * FastModeFactor)
    print(f"[Avalanche] {trials} trials on {AvalancheMsgBytes}-byte messages")
    csvpath = os.path.join(outroot, "avalanche.csv")
    header = ["trial","flip_index","diff_bits","fraction"]
    rows, fractions = [], []
    for t in range(trials):
        base = secrets.token_bytes(AvalancheMsgBytes)
        d0 = Md2Hash(base)
        pos, bit = secrets.randbelow(len(base)), 1 << secrets.randbelow(8)
        mod = bytearray(base)
        mod[pos] ^= bit
        d1 = Md2Hash(bytes(mod))
        diff = BitCount(bytes(x ^ y for x,y in zip(d0,d1)))
        frac = diff / (len(d0)*8)
        rows.append([t, f"{pos}:{bit}", diff, f"{frac:.6f}"])
        fractions.append(frac)
    AppendCSV(csvpath, header, rows)
    summary = {"mean": sum(fractions)/len(fractions), "min": min(fractions), "max": max(fractions)}
    SaveJSON(os.path.join(outroot, "avalanche_summary.json"), summary)
    print("[Avalanche] done", summary)
    return summary

def RunStats(outroot, fast=False):
    count = 512 if not fast else 64
    print(f"[Stats] generating {count} random digests")
    digests = [Md2Hash(secrets.token_bytes(64)) for _ in range(count)]
    bitfreq = BitFreq(digests)
    bytefreq = ByteFreq(digests)
    stats = {
        "bit_mean": sum(bitfreq)/len(bitfreq),
        "digest_lengths": sorted({len(d) for d in digests}),
    }
    SaveJSON(os.path.join(outroot, "stats.json"), stats)
    AppendCSV(os.path.join(outroot, "bytefreq.csv"), ["byte","frequency"], [(i, bytefreq[i]) for i in range(256)])
    return stats

def RunIncremental(outroot, fast=False):
    trials = IncrementalTrials if not fast else 8
    print(f"[Incremental] {trials} random chunkings and snapshot resumes")
    mismatches = 0
    for _ in range(trials):
        msg = secrets.token_bytes(secrets.randbelow(300))
        ref = Md2Hash(msg)

        h = Md2()
        for c in RandomSplit(msg): h.update(c)
        mismatches += (h.digest() != ref)

        cut = secrets.randbelow(len(msg) + 1)
        head = Md2(msg[:cut])
        resumed = Md2.deserialize(head.serialize())
        resumed.update(msg[cut:])
        mismatches += (resumed.digest() != ref)

        blocks = len(msg) // BlockSize * BlockSize
        core = Md2Core()
        for i in range(0, blocks, BlockSize): core.compress(msg[i:i+BlockSize])
        core = Md2Core.deserialize(core.serialize())
        mismatches += (core.finalize(msg[blocks:]) != ref)

    result = {"trials": trials, "mismatches": mismatches}
    SaveJSON(os.path.join(outroot, "incremental.json"), result)
    print("[Incremental] done", result)
    return result

def RunThroughput(outroot, fast=False):
    samples = ThroughputSamples if not fast else 4
    print(f"[Throughput] hashing {samples} x 4KB blocks")
    t0 = time.time()
    for _ in range(samples): Md2Hash(secrets.token_bytes(4096))
    dt = time.time() - t0
    kbps = samples * 4096 / dt / 1024
    with open(os.path.join(outroot, "throughput.txt"), "w") as f:
        f.write(f"{samples} samples, {dt:.3f}s, {kbps:.2f} KB/s\n")
    print(f"[Throughput] {kbps:.2f} KB/s")
    return {"samples": samples, "seconds": dt, "kbps": kbps}

def RunProfiler(outroot, fast=False):
    hashes = ProfileHashes if not fast else 8
    print(f"[Profile] running {hashes} hashes")
    pr = cProfile.Profile()
    pr.enable()
    for _ in range(hashes): Md2Hash(secrets.token_bytes(1024))
    pr.disable()
    prof_path = os.path.join(outroot, "profile.prof")
    pr.dump_stats(prof_path)
    print("[Profile] saved to", prof_path)
    return prof_path

# ==========================================================
#   MAIN ORCHESTRATION
# ==========================================================

def RunAll(outroot, fast=False):
    MkDir(outroot)
    result = {}
    result["kats"]        = RunKATs(outroot)
    result["avalanche"]   = RunAvalanche(outroot, fast)
    result["stats"]       = RunStats(outroot, fast)
    result["incremental"] = RunIncremental(outroot, fast)
    result["throughput"]  = RunThroughput(outroot, fast)
    result["profile"]     = RunProfiler(outroot, fast)
    SaveJSON(os.path.join(outroot, "summary.json"), result)
    print("All core tests complete. Results in:", outroot)
    return result

def Passed(result):
    return (result["kats"]["failures"] == 0
            and result["incremental"]["mismatches"] == 0
            and result["stats"]["digest_lengths"] == [OutputSize])

# ==========================================================
#   CLI
# ==========================================================

def Main():
    parser = argparse.ArgumentParser(description="MD2 Production Validation Suite")
    parser.add_argument("--fast", action="store_true", help="run reduced quick mode")
    parser.add_argument("--outdir", type=str, default=None, help="output directory (default ./results/timestamp)")
    args = parser.parse_args()

    outroot = args.outdir or os.path.join("results", TimeStamp())
    print("Results directory:", outroot)
    result = RunAll(outroot, fast=args.fast)
    return 0 if Passed(result) else 1

if __name__ == "__main__":
    sys.exit(Main())
