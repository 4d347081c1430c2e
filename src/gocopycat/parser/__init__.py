"""Go source parsing through the Go toolchain's own `go/parser`."""
