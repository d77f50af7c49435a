"""
CPUID feature source.

Reports the instruction set extensions advertised by the CPU, using the
canonical CPUID names (``AVX2``, ``SSE4.2``, ``AESNI``...). The kernel
already decoded the CPUID leaves into /proc/cpuinfo flags; this source
only translates the kernel's flag names.
"""

from typing import Dict, List

from .base import FeatureSource, read_cpu_flags


# /proc/cpuinfo flag -> CPUID feature name
CPU_FLAG_NAMES: Dict[str, str] = {
    "cmov": "CMOV",
    "nx": "NX",
    "3dnow": "AMD3DNOW",
    "3dnowext": "AMD3DNOWEXT",
    "mmx": "MMX",
    "mmxext": "MMXEXT",
    "sse": "SSE",
    "sse2": "SSE2",
    "pni": "SSE3",
    "ssse3": "SSSE3",
    "sse4_1": "SSE4.1",
    "sse4_2": "SSE4.2",
    "sse4a": "SSE4A",
    "popcnt": "POPCNT",
    "aes": "AESNI",
    "pclmulqdq": "CLMUL",
    "ht": "HTT",
    "hle": "HLE",
    "rtm": "RTM",
    "rdrand": "RDRAND",
    "rdseed": "RDSEED",
    "adx": "ADX",
    "sha_ni": "SHA",
    "avx": "AVX",
    "avx2": "AVX2",
    "avx512f": "AVX512F",
    "avx512dq": "AVX512DQ",
    "avx512ifma": "AVX512IFMA",
    "avx512pf": "AVX512PF",
    "avx512er": "AVX512ER",
    "avx512cd": "AVX512CD",
    "avx512bw": "AVX512BW",
    "avx512vl": "AVX512VL",
    "avx512vbmi": "AVX512VBMI",
    "erms": "ERMS",
    "f16c": "F16C",
    "fma": "FMA3",
    "fma4": "FMA4",
    "xop": "XOP",
    "bmi1": "BMI1",
    "bmi2": "BMI2",
    "abm": "LZCNT",
    "mpx": "MPX",
    "cx16": "CX16",
}


class CpuidSource(FeatureSource):

    def name(self) -> str:
        return "cpuid"

    def discover(self) -> List[str]:
        cpuinfo = self.proc("cpuinfo")
        try:
            flags = read_cpu_flags(cpuinfo)
        except OSError as e:
            raise self.error(f"failed to read {cpuinfo}: {e}") from e

        return sorted(CPU_FLAG_NAMES[flag] for flag in flags if flag in CPU_FLAG_NAMES)
