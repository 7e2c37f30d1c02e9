"""Well-known Info.plist tokens."""

from __future__ import annotations

JVM_MAIN_CLASS_NAME = "JVMMainClassName"
JVM_MAIN_MODULE_NAME = "JVMMainModuleName"

CF_BUNDLE_DISPLAY_NAME = "CFBundleDisplayName"
CF_BUNDLE_NAME = "CFBundleName"
CF_BUNDLE_IDENTIFIER = "CFBundleIdentifier"
CF_BUNDLE_SHORT_VERSION_STRING = "CFBundleShortVersionString"
CF_BUNDLE_EXECUTABLE = "CFBundleExecutable"
CF_BUNDLE_ICON_FILE = "CFBundleIconFile"

JVM_RUNTIME_PATH = "JVMRuntimePath"
NATIVE_LIBRARY_PATH = "NativeLibraryPath"

DEFAULT_EXECUTABLE = "JavaLauncher"

RUNTIME_BUNDLE_PATH = "Contents/PlugIns/Runtime.jre"
NATIVE_LIBRARY_BUNDLE_PATH = "Contents/Java/lib"

# Structural keys: always forced, never taken from user configuration.
RESERVED_VALUES = {
    JVM_RUNTIME_PATH: RUNTIME_BUNDLE_PATH,
    NATIVE_LIBRARY_PATH: NATIVE_LIBRARY_BUNDLE_PATH,
}
