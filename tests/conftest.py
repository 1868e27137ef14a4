"""Test configuration."""

from pathlib import Path

import pytest

from hermex.config import reset_config


@pytest.fixture(autouse=True)
def fresh_config(tmp_path, monkeypatch):
    """Run every test from an empty directory with default configuration."""
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def sample_project_dir(tmp_path) -> Path:
    """Create a sample React project directory."""
    project = tmp_path / "sample_project"
    project.mkdir(parents=True, exist_ok=True)
    return project


@pytest.fixture
def sample_tsx_file(sample_project_dir) -> Path:
    """Create a component file using a design-system library."""
    src = sample_project_dir / "src"
    src.mkdir(exist_ok=True)

    tsx_file = src / "App.tsx"
    tsx_file.write_text("""
import React, { lazy } from "react";
import { Button, Input as TextInput } from "@acme/ui";
import * as Icons from "@acme/icons";
import Card from "@acme/ui/card";
import { helper } from "./utils";

const Settings = lazy(() => import("./Settings"));

export function App({ onSave, props }: { onSave: () => void; props: object }) {
  const Field = props ? TextInput : Button;
  return (
    <Card title="Hello">
      <Button variant="primary" onClick={onSave} />
      <Button {...props} />
      <Field />
      <Icons.Star size={12} />
      <Settings />
    </Card>
  );
}
""")
    return tsx_file


@pytest.fixture
def sample_package_lock(sample_project_dir) -> Path:
    """Create a package-lock.json for the sample project."""
    lock = sample_project_dir / "package-lock.json"
    lock.write_text("""{
  "name": "sample",
  "lockfileVersion": 3,
  "packages": {
    "": {"name": "sample"},
    "node_modules/@acme/ui": {"version": "2.4.0"},
    "node_modules/@acme/icons": {"version": "1.1.0"},
    "node_modules/react": {"version": "18.2.0"}
  }
}""")
    return lock
