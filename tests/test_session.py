import io
import unittest

from openpyxl import Workbook

from sheet_quality.session import MAX_UPLOAD_BYTES, FileRegistry, UploadError, check_upload, process_upload

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def workbook_bytes(rows) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Sheet1"
    for row in rows:
        ws.append(row)
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


class FileRegistryTests(unittest.TestCase):
    def test_crud_lifecycle(self):
        registry = FileRegistry()
        first = registry.create_file(filename="1-a.xlsx", original_name="a.xlsx", mime_type=XLSX_MIME, size=10)
        second = registry.create_file(filename="2-b.xlsx", original_name="b.xlsx", mime_type=XLSX_MIME, size=20)
        self.assertEqual((first.id, second.id), (1, 2))
        self.assertEqual(first.status, "pending")

        updated = registry.update_file(1, status="completed")
        self.assertEqual(updated.status, "completed")
        self.assertEqual(registry.get_file(1).status, "completed")
        self.assertIsNone(registry.update_file(99, status="failed"))

        self.assertTrue(registry.delete_file(1))
        self.assertFalse(registry.delete_file(1))
        self.assertEqual([record.id for record in registry.all_files()], [2])

    def test_registries_do_not_share_state(self):
        one = FileRegistry()
        two = FileRegistry()
        one.create_file(filename="f", original_name="f.xlsx", mime_type="", size=1)
        self.assertEqual(two.all_files(), [])


class ProcessUploadTests(unittest.TestCase):
    def test_successful_upload_stores_every_sheet(self):
        registry = FileRegistry()
        content = workbook_bytes([["Name", "Email"], ["Ann", "ann@example.com"]])
        record = process_upload(registry, "contacts.xlsx", content, XLSX_MIME)

        self.assertEqual(record.status, "completed")
        self.assertEqual(record.sheet_names, ["Sheet1"])
        self.assertEqual(record.data["Sheet1"][1], ["Ann", "ann@example.com"])
        self.assertEqual(record.size, len(content))
        self.assertTrue(record.filename.endswith("-contacts.xlsx"))
        self.assertIsNotNone(record.processed_at)

    def test_parse_failure_is_recorded_and_raised(self):
        registry = FileRegistry()
        with self.assertRaisesRegex(UploadError, "Failed to process Excel file"):
            process_upload(registry, "broken.xlsx", b"not a workbook", XLSX_MIME)
        [record] = registry.all_files()
        self.assertEqual(record.status, "failed")
        self.assertIn("Could not read workbook", record.error_message)

    def test_rejects_wrong_type_and_oversized_files(self):
        with self.assertRaisesRegex(UploadError, "Only .xls and .xlsx"):
            check_upload("notes.pdf", 10, "application/pdf")
        with self.assertRaisesRegex(UploadError, "larger than 10 MB"):
            check_upload("big.xlsx", MAX_UPLOAD_BYTES + 1, XLSX_MIME)
        check_upload("legacy.XLS", 10)

    def test_rejected_upload_is_not_registered(self):
        registry = FileRegistry()
        with self.assertRaises(UploadError):
            process_upload(registry, "notes.txt", b"hello", "text/plain")
        self.assertEqual(registry.all_files(), [])


if __name__ == "__main__":
    unittest.main()
