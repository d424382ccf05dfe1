import json

from javadoc_merge.models.doc_models import MergeResult


# --- Pretty printing & JSON export ------------------------------------------

def print_summary(results: list[MergeResult]):
    """
    Human-friendly printout of what was merged.
    """
    merged = [r for r in results if r.documented]
    print("\n=== MERGED CLASSES ===")
    for r in sorted(merged, key=lambda r: r.class_name or ""):
        print(f" - {r.class_name} ({r.class_kind})  {r.replaced} comment(s) replaced")
        for w in r.warnings:
            print(f"      kept original: {w.signature}")

    undocumented = [r for r in results if not r.documented]
    if undocumented:
        print("\n=== COPIED WITHOUT DOCUMENTATION ===")
        for r in sorted(undocumented, key=lambda r: r.path or r.class_name or ""):
            print(" -", r.path or r.class_name)

    total = sum(r.replaced for r in results)
    warnings = sum(len(r.warnings) for r in results)
    print(f"\n{len(results)} file(s), {len(merged)} merged, {total} comment(s) replaced, {warnings} warning(s)")


def to_json(results: list[MergeResult]) -> str:
    """
    Serializes the merge report to JSON.
    """
    out = {"files": []}
    for r in results:
        out["files"].append({
            "path": r.path,
            "className": r.class_name,
            "kind": r.class_kind,
            "documented": r.documented,
            "replaced": r.replaced,
            "warnings": [
                {
                    "signature": str(w.signature) if w.signature is not None else None,
                    "sourceComment": w.source_comment,
                    "rejectedComment": w.rejected_comment,
                } for w in r.warnings
            ],
        })
    return json.dumps(out, indent=2, ensure_ascii=False)
