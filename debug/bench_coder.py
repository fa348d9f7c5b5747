#!/usr/bin/env python3
"""Quick encode/decode benchmark - direct timing only"""
import time

HIGH_VAL = 100_000
LOW_VAL = -HIGH_VAL


def bench(label, fn, inputs):
    start = time.perf_counter()
    for item in inputs:
        fn(item)
    elapsed = time.perf_counter() - start
    print(f"  {label:<14} {elapsed:.3f}s ({elapsed / len(inputs) * 1e9:.0f} ns/op)")


def main():
    from idmask import Coder

    coder = Coder(42, 8)
    values = range(LOW_VAL, HIGH_VAL)
    print(f"Benchmarking {len(values)} values from {LOW_VAL} to {HIGH_VAL}...\n")

    long_ids = [coder.encode_long(v) for v in values]
    double_ids = [coder.encode_double(v) for v in values]
    bench("encode_long", coder.encode_long, values)
    bench("decode_long", coder.decode_long, long_ids)
    bench("encode_double", coder.encode_double, values)
    bench("decode_double", coder.decode_double, double_ids)
    print("\nbenchmark complete")


if __name__ == '__main__':
    main()
