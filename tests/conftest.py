"""
Shared pytest fixtures for the Crowbar test suite.

This module provides:
- Sample Rust programs covering every supported declaration form
- Temporary files holding those programs
- Pre-configured Crowbar sessions (normal and dry-run modes)

Fixture Naming Convention:
- sample_* : Fixtures that provide sample source strings
- tmp_* : Fixtures that create temporary files
- crowbar_* : Fixtures that provide configured Crowbar instances
"""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from crowbar import Crowbar


# =============================================================================
# Sample Rust Code Fixtures
# =============================================================================

@pytest.fixture
def sample_program() -> str:
    """
    A program with one declaration of every supported kind.

    Contains:
    - Integer, float, boolean, &str and String declarations
    - A mutable binding
    - An unsupported type (Vec<i32>)
    - An inferred (unannotated) binding, which discovery skips
    - A println! macro using the variables
    """
    return textwrap.dedent('''\
        fn main() {
            let count: i32 = 42;
            let mut ratio: f64 = 0.5;
            let enabled: bool = true;
            let greeting: &str = "hello";
            let name: String = String::from("crowbar");
            let items: Vec<i32> = vec![1, 2, 3];
            let inferred = 10;
            println!("{} {} {} {} {} {:?} {}", count, ratio, enabled, greeting, name, items, inferred);
        }
    ''')


@pytest.fixture
def sample_nested_program() -> str:
    """
    A program with declarations in nested scopes.

    Contains:
    - A declaration inside a plain block
    - Declarations inside if and loop bodies
    - A declaration inside a helper function
    """
    return textwrap.dedent('''\
        fn helper() -> i64 {
            let base: i64 = 7;
            base * 2
        }

        fn main() {
            let outer: i32 = 1;
            {
                let inner: i32 = outer + 1;
            }
            if outer > 0 {
                let flag: bool = false;
            }
            for _ in 0..3 {
                let step: f32 = 0.25;
            }
            let total: i64 = helper();
        }
    ''')


@pytest.fixture
def sample_shadowing_program() -> str:
    """
    A program that declares the same name and type twice (shadowing).
    """
    return textwrap.dedent('''\
        fn main() {
            let x: i32 = 1;
            println!("{}", x);
            let x: i32 = 2;
            println!("{}", x);
        }
    ''')


# =============================================================================
# Temporary File Fixtures
# =============================================================================

@pytest.fixture
def tmp_rust_file(tmp_path: Path, sample_program: str) -> Path:
    """
    Create a temporary main.rs holding sample_program.
    """
    path = tmp_path / "main.rs"
    path.write_text(sample_program)
    return path


# =============================================================================
# Crowbar Instance Fixtures
# =============================================================================

@pytest.fixture
def crowbar_loaded(tmp_rust_file: Path) -> Crowbar:
    """
    Crowbar session with sample_program loaded and discovered.
    """
    cb = Crowbar()
    cb.load(tmp_rust_file)
    return cb


@pytest.fixture
def crowbar_dry_run(tmp_rust_file: Path) -> Crowbar:
    """
    Dry-run Crowbar session with sample_program loaded.
    """
    cb = Crowbar(dry_run=True)
    cb.load(tmp_rust_file)
    return cb
