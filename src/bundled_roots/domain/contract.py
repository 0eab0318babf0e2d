"""
Pool contract — the names the generated code calls in the consuming package.

The generated file is compiled into the trust-store package and calls back into
it. Those identifiers and their arities are an interface shared by two code
bases; they live here as one versioned value instead of being scattered through
string templates. Any change to a field is breaking for already generated files
and must bump `version`.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PoolContract:
    version: int
    package: str
    build_constraint: str
    entry_point: str
    pool_constructor: str
    register: str
    register_arity: int
    uncompressor: str
    uncompressor_arity: int
    license_notice: tuple[str, ...] = ()


POOL_CONTRACT_V1 = PoolContract(
    version=1,
    package="x509",
    build_constraint="!x509omitbundledroots",
    # func loadSystemRoots() (*CertPool, error)
    entry_point="loadSystemRoots",
    pool_constructor="NewCertPool",
    # p.addCertFuncNotDup(rawSubject, subjectKeyID string, getCert func() (*Certificate, error))
    register="addCertFuncNotDup",
    register_arity=3,
    # certUncompressor(zcertBytes string) func() (*Certificate, error)
    uncompressor="certUncompressor",
    uncompressor_arity=1,
    # comment block of the consuming package, copied into every generated file
    license_notice=(
        "Copyright 2015 The Go Authors. All rights reserved.",
        "Use of this source code is governed by a BSD-style",
        "license that can be found in the LICENSE file.",
    ),
)

DEFAULT_CONTRACT = POOL_CONTRACT_V1
