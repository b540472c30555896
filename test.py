#!/usr/bin/env python3
"""
Smoke test script for Moon Explorer
"""

import sys


def test_dependencies():
    print("Testing Dependencies...")
    try:
        import numpy
        print(f"  ✅ NumPy version: {numpy.__version__}")

        import fastapi
        print(f"  ✅ FastAPI version: {fastapi.__version__}")

        import uvicorn
        print(f"  ✅ Uvicorn version: {uvicorn.__version__}")

        import websockets
        ws_version = getattr(websockets, "__version__", None)
        if not ws_version:
            from importlib.metadata import PackageNotFoundError, version as pkg_version
            try:
                ws_version = pkg_version("websockets")
            except PackageNotFoundError:
                ws_version = "unknown"
        print(f"  ✅ WebSockets version: {ws_version}")

        import matplotlib
        print(f"  ✅ Matplotlib version: {matplotlib.__version__}")

        print("✅ All dependencies installed!\n")
        return True

    except ImportError as e:
        print(f"❌ Missing dependency: {e}\n")
        print("Please run: pip install -e .\n")
        return False


def test_terrain_and_trajectories():
    print("Testing Terrain and Trajectories...")
    try:
        from moon_explorer.catalog import ARTIFACTS
        from moon_explorer.elevation import build_catalog_field
        from moon_explorer.trajectory import MissionProfile, TrajectorySynthesizer, clearance_report

        field = build_catalog_field()
        print(f"  ✅ Elevation field: {field.shape[0]}x{field.shape[1]}")

        # Grid vertices must sample back exactly.
        for i, j in [(0, 0), (35, 72), (71, 143)]:
            got = field.sample(field.lat_of(i), field.lon_of(j))
            if abs(got - field.values[i, j]) > 1e-9:
                raise AssertionError(f"Sample at vertex ({i}, {j}) is {got}, expected {field.values[i, j]}")
        print("  ✅ Grid vertices sample exactly")

        synthesizer = TrajectorySynthesizer()
        counts = {profile: 0 for profile in MissionProfile}
        worst = float("inf")
        for artifact in ARTIFACTS:
            trajectory = synthesizer.build(artifact, field)
            counts[trajectory.profile] += 1
            if trajectory.profile is MissionProfile.STEADY_ORBIT:
                continue
            report = clearance_report(trajectory.points, field, synthesizer.clearance)
            worst = min(worst, report.min_margin)
            if report.min_margin < -1e-6:
                raise AssertionError(
                    f"{artifact.name} dips below the clearance shell by {-report.min_margin:.4f} at point {report.index}"
                )

        for profile, count in counts.items():
            print(f"  ✅ {profile.value}: {count} missions")
        print(f"  ✅ Worst clearance margin: {worst:.4f}")

        print("✅ Terrain and trajectory tests passed!\n")
        return True

    except Exception as e:
        print(f"❌ Terrain/trajectory test failed: {e}\n")
        import traceback
        traceback.print_exc()
        return False


def test_fastapi_import():
    print("Testing FastAPI Application...")
    try:
        from moon_explorer.main import app
        print(f"  ✅ FastAPI app created successfully")
        print(f"  ✅ App title: {app.title}")

        # Check routes
        routes = [route.path for route in app.routes]
        print(f"  ✅ Available routes: {len(routes)}")
        for required in ("/api/elevation", "/api/trajectory/{name}", "/ws"):
            if required not in routes:
                raise AssertionError(f"Missing route: {required}")

        print("✅ FastAPI tests passed!\n")
        return True

    except Exception as e:
        print(f"❌ FastAPI test failed: {e}\n")
        import traceback
        traceback.print_exc()
        return False


def main():
    print("=" * 60)
    print("Moon Explorer - Smoke Test Suite")
    print("=" * 60)
    print()

    results = []

    # Run tests
    results.append(("Dependencies", test_dependencies()))
    results.append(("Terrain and Trajectories", test_terrain_and_trajectories()))
    results.append(("FastAPI", test_fastapi_import()))

    # Summary
    print("=" * 60)
    print("Test Summary")
    print("=" * 60)

    passed = sum(1 for _, result in results if result)
    total = len(results)

    for test_name, result in results:
        status = "✅ PASS" if result else "❌ FAIL"
        print(f"{test_name:.<40} {status}")

    print()
    print(f"Total: {passed}/{total} tests passed")
    print()

    if passed == total:
        print("🎉 All tests passed! System is ready to run.")
        print()
        print("To start the server, run:")
        print("  moon-explorer --port 8712")
        print("  or")
        print("  python3 -m moon_explorer.main")
    else:
        print("⚠️  Some tests failed. Please fix the issues above.")

    print("=" * 60)

    return 0 if passed == total else 1


if __name__ == "__main__":
    sys.exit(main())
